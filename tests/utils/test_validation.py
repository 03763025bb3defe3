"""构建期校验测试"""
import pytest
from kubernetes.client import V1ObjectMeta

from dbmesh_config_parser.models.errors import (
    InvalidRegexError, InvalidRuleError, InvalidEndpointError, UnsupportedAlgorithmError
)
from dbmesh_config_parser.models.resource_models import (
    DatabaseEndpoint, ReadWriteSplittingRule, DATABASE_ENDPOINT_ROLE_KEY
)
from dbmesh_config_parser.utils.validation import (
    validate_patterns, validate_algorithm, validate_default_target,
    validate_rule, validate_endpoint_role
)


def test_valid_patterns_pass():
    validate_patterns(['^select', '(?i)insert\\s+into'], 'circuitBreaks[0]')


def test_bad_pattern_reports_location():
    with pytest.raises(InvalidRegexError) as exc_info:
        validate_patterns(['^select', '(unclosed'], 'circuitBreaks[1]')
    assert exc_info.value.pattern == '(unclosed'
    assert exc_info.value.location == 'circuitBreaks[1]'


@pytest.mark.parametrize('pattern', [
    '^(?=select)', '^select(?!.*for update)', '(?<=from )users', '(?<!x)y',
    r'(\w+) \1', r'(?P<t>\w+) (?P=t)',
])
def test_lookaround_and_backreference_rejected(pattern):
    with pytest.raises(InvalidRegexError) as exc_info:
        validate_patterns([pattern], 'circuitBreaks[0]')
    assert exc_info.value.pattern == pattern


@pytest.mark.parametrize('pattern', [r'\\1', r'\(?=', r'(?i)^select\s+\d', r'(?P<t>\w+)'])
def test_escaped_constructs_allowed(pattern):
    validate_patterns([pattern], 'circuitBreaks[0]')


@pytest.mark.parametrize('algorithm', ['roundrobin', 'random'])
def test_supported_algorithms(algorithm):
    validate_algorithm(algorithm, 'simpleLoadBalance')


def test_unsupported_algorithm():
    with pytest.raises(UnsupportedAlgorithmError) as exc_info:
        validate_algorithm('leastconn', 'simpleLoadBalance')
    assert exc_info.value.algorithm == 'leastconn'


@pytest.mark.parametrize('target', ['', 'read', 'readwrite'])
def test_default_target_accepted(target):
    validate_default_target(target, 'static')


def test_default_target_rejected():
    with pytest.raises(InvalidRuleError):
        validate_default_target('write', 'static')


def test_regex_rule():
    validate_rule(ReadWriteSplittingRule(name='r', regex=('^select',), target='read'), 'static')


def test_generic_rule():
    validate_rule(ReadWriteSplittingRule(name='all', type='generic', algorithm_name='random'), 'static')


@pytest.mark.parametrize('rule', [
    ReadWriteSplittingRule(name='', regex=('^select',), target='read'),
    ReadWriteSplittingRule(name='r', regex=(), target='read'),
    ReadWriteSplittingRule(name='r', regex=('^select',), target='write'),
    ReadWriteSplittingRule(name='r', type='generic', regex=('^select',)),
    ReadWriteSplittingRule(name='r', type='hint', regex=('^select',), target='read'),
])
def test_malformed_rules(rule):
    with pytest.raises(InvalidRuleError):
        validate_rule(rule, 'static')


def test_rule_regex_checked_only_when_enabled():
    rule = ReadWriteSplittingRule(name='r', regex=('[',), target='read')
    validate_rule(rule, 'static', check_regex=False)
    with pytest.raises(InvalidRegexError):
        validate_rule(rule, 'static')


def test_rule_algorithm_checked():
    rule = ReadWriteSplittingRule(name='r', regex=('^select',), target='read', algorithm_name='weighted')
    with pytest.raises(UnsupportedAlgorithmError):
        validate_rule(rule, 'static')


def _endpoint(annotations):
    return DatabaseEndpoint(metadata=V1ObjectMeta(name='db', namespace='demo', annotations=annotations))


@pytest.mark.parametrize('annotations', [None, {}, {DATABASE_ENDPOINT_ROLE_KEY: 'read'},
                                         {DATABASE_ENDPOINT_ROLE_KEY: 'read-write'}])
def test_endpoint_roles_accepted(annotations):
    validate_endpoint_role(_endpoint(annotations), DATABASE_ENDPOINT_ROLE_KEY)


def test_endpoint_role_rejected():
    with pytest.raises(InvalidEndpointError):
        validate_endpoint_role(_endpoint({DATABASE_ENDPOINT_ROLE_KEY: 'primary'}), DATABASE_ENDPOINT_ROLE_KEY)
