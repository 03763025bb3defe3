from .file_utils import load_json_file, load_manifests
from .duration import parse_duration
from .selector import selector_matches, filter_endpoints

__all__ = [
    'load_json_file',
    'load_manifests',
    'parse_duration',
    'selector_matches',
    'filter_endpoints'
]
