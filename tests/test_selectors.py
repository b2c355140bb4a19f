"""Tests for type and property selectors."""

from clientgen.models import (
    ConversionDecision,
    PropertyInfo,
    SourceType,
    TypeKind,
    describe_properties,
)
from clientgen.selectors import (
    keep_all_properties,
    keep_all_types,
    keep_namespaces,
    match_properties,
    optional_if_nullable,
    property_policy,
    resolve_decision,
    should_keep_type,
)


STRING = SourceType(kind=TypeKind.CLASS, namespace="System", name="String")

CUSTOMER = SourceType(
    kind=TypeKind.CLASS,
    namespace="App.Models",
    name="Customer",
    properties=(
        PropertyInfo(name="name", type=STRING),
        PropertyInfo(name="notes", type=STRING, nullable=True),
        PropertyInfo(name="owner_id", type=STRING),
    ),
)

NAME, NOTES, OWNER_ID = describe_properties(CUSTOMER)


def always(decision: ConversionDecision):
    return lambda descriptor: decision


class TestTypeSelectors:
    """Tests for type selector composition."""

    def test_no_selectors_keeps_everything(self) -> None:
        """Test that an empty selector list keeps every type."""
        assert should_keep_type(CUSTOMER, [])

    def test_any_selector_keeps(self) -> None:
        """Test that one accepting selector is enough."""
        assert should_keep_type(CUSTOMER, [lambda t: False, lambda t: True])
        assert not should_keep_type(CUSTOMER, [lambda t: False])

    def test_keep_all_types(self) -> None:
        """Test the keep-all policy."""
        assert keep_all_types(CUSTOMER)

    def test_keep_namespaces_matches_prefix_segments(self) -> None:
        """Test that namespace prefixes match whole segments."""
        selector = keep_namespaces(["App"])
        other = SourceType(kind=TypeKind.CLASS, namespace="Application", name="X")
        loose = SourceType(kind=TypeKind.CLASS, name="Loose")

        assert selector(CUSTOMER)
        assert not selector(other)
        assert not selector(loose)


class TestPropertySelectors:
    """Tests for property selector composition."""

    def test_no_selectors_is_required(self) -> None:
        """Test that properties are Required without selectors."""
        assert resolve_decision(NAME, []) == ConversionDecision.REQUIRED

    def test_strictest_vote_wins(self) -> None:
        """Test that Optional beats Excluded and Required beats both."""
        excluded = always(ConversionDecision.EXCLUDED)
        optional = always(ConversionDecision.OPTIONAL)
        required = always(ConversionDecision.REQUIRED)

        assert resolve_decision(NAME, [excluded, optional]) == ConversionDecision.OPTIONAL
        assert resolve_decision(NAME, [optional, excluded]) == ConversionDecision.OPTIONAL
        assert resolve_decision(NAME, [excluded, optional, required]) == ConversionDecision.REQUIRED
        assert resolve_decision(NAME, [excluded]) == ConversionDecision.EXCLUDED

    def test_keep_all_properties(self) -> None:
        """Test the keep-all policy."""
        assert keep_all_properties(NOTES) == ConversionDecision.REQUIRED

    def test_optional_if_nullable(self) -> None:
        """Test that nullable properties become optional."""
        assert optional_if_nullable(NAME) == ConversionDecision.REQUIRED
        assert optional_if_nullable(NOTES) == ConversionDecision.OPTIONAL

    def test_match_properties_on_qualified_and_bare_names(self) -> None:
        """Test glob matching on Type.property and on the bare name."""
        by_type = match_properties(["Customer.n*"], ConversionDecision.OPTIONAL)
        by_name = match_properties(["*_id"], ConversionDecision.REQUIRED)

        assert by_type(NAME) == ConversionDecision.OPTIONAL
        assert by_type(NOTES) == ConversionDecision.OPTIONAL
        assert by_type(OWNER_ID) == ConversionDecision.EXCLUDED
        assert by_name(OWNER_ID) == ConversionDecision.REQUIRED
        assert by_name(NAME) == ConversionDecision.EXCLUDED


class TestPropertyPolicy:
    """Tests for the clientgen.json property policy."""

    def test_defaults(self) -> None:
        """Test include-all with nullable properties optional."""
        policy = property_policy()

        assert policy(NAME) == ConversionDecision.REQUIRED
        assert policy(NOTES) == ConversionDecision.OPTIONAL

    def test_include_patterns_exclude_the_rest(self) -> None:
        """Test that unmatched properties are excluded."""
        policy = property_policy(include=["name", "notes"])

        assert policy(OWNER_ID) == ConversionDecision.EXCLUDED
        assert policy(NAME) == ConversionDecision.REQUIRED

    def test_optional_patterns(self) -> None:
        """Test that optional globs only apply to included properties."""
        policy = property_policy(include=["name", "notes"], optional=["Customer.name", "owner_id"])

        assert policy(NAME) == ConversionDecision.OPTIONAL
        assert policy(OWNER_ID) == ConversionDecision.EXCLUDED

    def test_nullable_optional_disabled(self) -> None:
        """Test that nullable properties stay required when disabled."""
        policy = property_policy(nullable_optional=False)

        assert policy(NOTES) == ConversionDecision.REQUIRED
