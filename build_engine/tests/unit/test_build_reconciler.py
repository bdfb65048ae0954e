"""Unit tests for build_engine.reconciler.build."""

from __future__ import annotations

import pytest

from build_engine.config import Settings
from build_engine.errors import ClientUnavailableError, StatusConflictError
from build_engine.models.build import (
    ALL_VALIDATIONS_SUCCEEDED,
    ANNOTATION_VERIFY_REPOSITORY,
    BuildReason,
    GitSource,
    Output,
    Retention,
    StrategyRef,
)
from build_engine.models.meta import ConditionStatus
from build_engine.reconciler.build import BuildReconciler
from build_engine.reconciler.client import KIND_BUILD, Request
from build_engine.testing import (
    NAMESPACE,
    FakeClient,
    StaticRepositoryProbe,
    make_build,
    make_build_run,
    make_secret,
    make_strategy,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)  # type: ignore[call-arg]


def _request(name: str = "buildah-golang") -> Request:
    return Request(namespace=NAMESPACE, name=name)


class TestBuildReconciler:
    @pytest.mark.asyncio
    async def test_missing_build_is_ignored(self, settings):
        client = FakeClient()
        result = await BuildReconciler(client, settings).reconcile(_request())
        assert result.requeue is False
        assert client.status_updates == []

    @pytest.mark.asyncio
    async def test_valid_build_is_registered(self, settings):
        client = FakeClient(make_build(), make_strategy())
        await BuildReconciler(client, settings, probe=StaticRepositoryProbe()).reconcile(_request())

        assert len(client.status_updates) == 1
        status = client.stored(KIND_BUILD, NAMESPACE, "buildah-golang").status
        assert status.registered == ConditionStatus.TRUE
        assert status.reason == BuildReason.SUCCEEDED
        assert status.message == ALL_VALIDATIONS_SUCCEEDED

    @pytest.mark.asyncio
    async def test_missing_strategy(self, settings):
        client = FakeClient(make_build())
        await BuildReconciler(client, settings, probe=StaticRepositoryProbe()).reconcile(_request())

        status = client.stored(KIND_BUILD, NAMESPACE, "buildah-golang").status
        assert status.registered == ConditionStatus.FALSE
        assert status.reason == BuildReason.BUILD_STRATEGY_NOT_FOUND

    @pytest.mark.asyncio
    async def test_cluster_strategy_found(self, settings):
        build = make_build(strategy=StrategyRef(name="kaniko", kind="ClusterBuildStrategy"))
        client = FakeClient(build, make_strategy("kaniko", cluster=True))
        await BuildReconciler(client, settings, probe=StaticRepositoryProbe()).reconcile(_request())
        assert client.stored(KIND_BUILD, NAMESPACE, build.metadata.name).status.registered == ConditionStatus.TRUE

    @pytest.mark.asyncio
    async def test_highest_priority_failure_recorded(self, settings):
        # Secrets come before the strategy in priority order; both are broken.
        build = make_build(output=Output(image="registry.example.com/app", push_secret="missing"))
        client = FakeClient(build)
        await BuildReconciler(client, settings, probe=StaticRepositoryProbe()).reconcile(_request())

        status = client.stored(KIND_BUILD, NAMESPACE, build.metadata.name).status
        assert status.reason == BuildReason.SPEC_OUTPUT_SECRET_REF_NOT_FOUND
        assert len(client.status_updates) == 1

    @pytest.mark.asyncio
    async def test_secrets_resolved_through_client(self, settings):
        build = make_build(
            source=GitSource(url="https://github.com/org/repo", clone_secret="clone"),
            output=Output(image="registry.example.com/app", push_secret="push"),
        )
        client = FakeClient(build, make_strategy(), make_secret("clone"), make_secret("push"))
        await BuildReconciler(client, settings, probe=StaticRepositoryProbe()).reconcile(_request())
        assert client.stored(KIND_BUILD, NAMESPACE, build.metadata.name).status.registered == ConditionStatus.TRUE

    @pytest.mark.asyncio
    async def test_repository_probe_used_when_requested(self, settings):
        build = make_build(annotations={ANNOTATION_VERIFY_REPOSITORY: "true"})
        probe = StaticRepositoryProbe()
        client = FakeClient(build, make_strategy())

        await BuildReconciler(client, settings, probe=probe).reconcile(_request())

        assert probe.probed == ["https://github.com/shipwright-io/sample-go"]
        status = client.stored(KIND_BUILD, NAMESPACE, build.metadata.name).status
        assert status.reason == BuildReason.REMOTE_REPOSITORY_UNREACHABLE

    @pytest.mark.asyncio
    async def test_owner_references_added_to_runs(self, settings):
        build = make_build(retention=Retention(at_build_deletion=True))
        client = FakeClient(build, make_strategy(), make_build_run(), make_build_run("other", build_name="other"))

        await BuildReconciler(client, settings, probe=StaticRepositoryProbe()).reconcile(_request())

        owned = client.stored("BuildRun", NAMESPACE, "buildah-golang-run")
        assert owned.metadata.controller_reference().name == build.metadata.name
        assert client.stored("BuildRun", NAMESPACE, "other").metadata.owner_references == []

    @pytest.mark.asyncio
    async def test_previous_failure_replaced_on_success(self, settings):
        build = make_build()
        build.status.registered = ConditionStatus.FALSE
        build.status.reason = BuildReason.BUILD_STRATEGY_NOT_FOUND
        client = FakeClient(build, make_strategy())

        await BuildReconciler(client, settings, probe=StaticRepositoryProbe()).reconcile(_request())

        assert client.stored(KIND_BUILD, NAMESPACE, build.metadata.name).status.reason == BuildReason.SUCCEEDED

    @pytest.mark.asyncio
    async def test_technical_error_writes_no_status(self, settings):
        client = FakeClient(make_build(), make_strategy())
        # Raised while the owner reference validator lists runs, after several validators passed.
        client.errors["list"] = ClientUnavailableError("connection reset")

        with pytest.raises(ClientUnavailableError):
            await BuildReconciler(client, settings, probe=StaticRepositoryProbe()).reconcile(_request())
        assert client.status_updates == []

    @pytest.mark.asyncio
    async def test_status_conflict_propagates(self, settings):
        client = FakeClient(make_build(), make_strategy())
        client.errors["update_status"] = StatusConflictError("stale resource version")
        with pytest.raises(StatusConflictError):
            await BuildReconciler(client, settings, probe=StaticRepositoryProbe()).reconcile(_request())
