"""Tests for the conflict-resolution merge engine"""

import pydantic
import pytest
from structlog.testing import capture_logs

from kubeweave.secrets.domain.enums import ConflictScope, ConflictStrategy
from kubeweave.secrets.domain.models import SecretOrigin
from kubeweave.secrets.orchestrator.merge_engine import (
    DEFAULT_CONFLICT_STRATEGIES,
    ConflictOptions,
    SecretMergeEngine,
)
from kubeweave.shared.domain.exceptions import ConfigurationError, ConflictError


def origin(value, stack="s1", manager="m1", provider="p1", key="kubectl:default/shared", source="SECRET"):
    return SecretOrigin(
        key=key,
        value=value,
        source=source,
        provider_name=provider,
        manager_name=manager,
        stack_name=stack,
        origin_path=f"{stack}/{manager}/{provider}/{source}",
    )


class TestScopes:
    def test_defaults(self):
        """Only intraProvider is relaxed by default"""
        assert DEFAULT_CONFLICT_STRATEGIES == {
            ConflictScope.INTRA_PROVIDER: ConflictStrategy.AUTO_MERGE,
            ConflictScope.CROSS_PROVIDER: ConflictStrategy.ERROR,
            ConflictScope.INTRA_STACK: ConflictStrategy.ERROR,
            ConflictScope.CROSS_STACK: ConflictStrategy.ERROR,
        }

    @pytest.mark.parametrize(
        ("incoming", "expected"),
        [
            (origin(1), ConflictScope.INTRA_PROVIDER),
            (origin(1, provider="p2"), ConflictScope.CROSS_PROVIDER),
            (origin(1, manager="m2", provider="p2"), ConflictScope.INTRA_STACK),
            (origin(1, stack="s2", manager="m2", provider="p2"), ConflictScope.CROSS_STACK),
        ],
    )
    def test_compute_scope(self, incoming, expected):
        """The most specific difference decides the scope"""
        assert SecretMergeEngine.compute_scope(origin(0), incoming) == expected


class TestMerge:
    def test_first_contribution_is_baseline(self):
        """A single contribution is kept as-is"""
        result = SecretMergeEngine().merge([origin({"a": 1})])

        assert result.values == {"kubectl:default/shared": {"a": 1}}
        assert len(result.history["kubectl:default/shared"]) == 1

    def test_intra_provider_auto_merge(self):
        """Two maps from one provider are shallow-merged"""
        result = SecretMergeEngine().merge([origin({"a": 1}), origin({"b": 2})])

        assert result.values["kubectl:default/shared"] == {"a": 1, "b": 2}
        assert [o.value for o in result.history["kubectl:default/shared"]] == [{"a": 1}, {"b": 2}]

    def test_auto_merge_non_maps_overwrites(self):
        """autoMerge falls back to overwrite for scalars"""
        result = SecretMergeEngine().merge([origin("old"), origin("new")])

        assert result.values["kubectl:default/shared"] == "new"

    def test_cross_provider_error_by_default(self):
        """Different providers writing one destination fail"""
        engine = SecretMergeEngine()

        with pytest.raises(ConflictError) as exc_info:
            engine.merge([origin({"a": 1}), origin({"b": 2}, provider="p2")])

        message = str(exc_info.value)
        assert "kubectl:default/shared" in message
        assert "crossProvider" in message
        assert "s1/m1/p1/SECRET" in message
        assert "s1/m1/p2/SECRET" in message

    def test_cross_stack_overwrite_is_logged_without_values(self):
        """Overwrites are logged with origins only"""
        engine = SecretMergeEngine(ConflictOptions(strategies={"crossStack": "overwrite"}))

        with capture_logs() as logs:
            result = engine.merge([
                origin({"API_KEY": "Zmlyc3Q="}),
                origin({"API_KEY": "c2Vjb25k"}, stack="s2", manager="m2"),
            ])

        assert result.values["kubectl:default/shared"] == {"API_KEY": "c2Vjb25k"}
        [event] = [log for log in logs if log["event"] == "secret_conflict_overwritten"]
        assert event["scope"] == "crossStack"
        assert event["previous"] == "s1/m1/p1/SECRET"
        assert event["incoming"] == "s2/m2/p1/SECRET"
        assert "Zmlyc3Q=" not in repr(event)
        assert "c2Vjb25k" not in repr(event)

    def test_scope_is_measured_against_first_contribution(self):
        """A third contribution is compared with the first, not the previous one"""
        engine = SecretMergeEngine(ConflictOptions(strategies={"crossStack": "overwrite"}))

        result = engine.merge([
            origin({"a": 1}),
            origin({"b": 2}, stack="s2", manager="m2"),
            origin({"c": 3}),
        ])

        # third is intraProvider relative to the first, so it auto-merges
        assert result.values["kubectl:default/shared"] == {"b": 2, "c": 3}

    def test_keys_are_independent(self):
        """Different destinations never conflict"""
        result = SecretMergeEngine().merge([origin(1, key="a"), origin(2, key="b", provider="p2")])

        assert result.values == {"a": 1, "b": 2}


class TestConflictOptions:
    def test_overrides_merge_with_defaults(self):
        """Unset scopes keep their default"""
        strategies = ConflictOptions(strategies={"crossProvider": "autoMerge"}).resolved_strategies()

        assert strategies[ConflictScope.CROSS_PROVIDER] == ConflictStrategy.AUTO_MERGE
        assert strategies[ConflictScope.INTRA_PROVIDER] == ConflictStrategy.AUTO_MERGE
        assert strategies[ConflictScope.CROSS_STACK] == ConflictStrategy.ERROR

    def test_strict_forces_error_everywhere(self):
        """strict turns intraProvider into error too"""
        engine = SecretMergeEngine(ConflictOptions(strict=True))

        assert set(engine.strategies.values()) == {ConflictStrategy.ERROR}
        with pytest.raises(ConflictError):
            engine.merge([origin({"a": 1}), origin({"b": 2})])

    def test_strict_rejects_relaxation(self):
        """strict plus a relaxed scope is a configuration error"""
        with pytest.raises(ConfigurationError, match="Strict conflict mode"):
            SecretMergeEngine(ConflictOptions(strict=True, strategies={"crossStack": "overwrite"}))

    def test_strict_accepts_explicit_error(self):
        """Restating 'error' is fine in strict mode"""
        engine = SecretMergeEngine(ConflictOptions(strict=True, strategies={"crossStack": "error"}))

        assert engine.strategy_for(ConflictScope.CROSS_STACK) == ConflictStrategy.ERROR

    def test_unknown_strategy_rejected(self):
        """Strategy names are validated"""
        with pytest.raises(pydantic.ValidationError):
            ConflictOptions(strategies={"crossStack": "ignore"})


class TestOrdering:
    def test_history_follows_arrival_order(self):
        """History lists contributions exactly in the order they were merged"""
        engine = SecretMergeEngine(ConflictOptions(strategies={"crossStack": "overwrite"}))
        contributions = [
            origin({"a": 1}, source="FIRST"),
            origin({"b": 2}, stack="s2", source="SECOND"),
            origin({"c": 3}, source="THIRD"),
        ]

        result = engine.merge(contributions)

        assert [o.source for o in result.history["kubectl:default/shared"]] == ["FIRST", "SECOND", "THIRD"]

    def test_reordering_changes_the_winner(self):
        """Overwrite outcomes depend only on contribution order"""
        engine = SecretMergeEngine(ConflictOptions(strategies={"crossStack": "overwrite"}))
        left = origin({"API_KEY": "left"})
        right = origin({"API_KEY": "right"}, stack="s2")

        assert engine.merge([left, right]).values["kubectl:default/shared"] == {"API_KEY": "right"}
        assert engine.merge([right, left]).values["kubectl:default/shared"] == {"API_KEY": "left"}

    def test_winner_tracks_overwrites_not_unions(self):
        """An overwrite moves the winner; an autoMerge union keeps it"""
        engine = SecretMergeEngine(
            ConflictOptions(strategies={"crossStack": "overwrite", "intraProvider": "autoMerge"})
        )
        key = "kubectl:default/shared"

        result = engine.merge([origin({"a": 1}), origin({"b": 2})])
        assert result.winners[key] == 0
        assert result.values[key] == {"a": 1, "b": 2}

        engine.add(result, origin({"c": 3}, stack="s2"))
        assert result.winners[key] == 2
        assert result.values[key] == {"c": 3}
