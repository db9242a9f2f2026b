"""Tests for the chart deployment pipeline."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from rops.cli.deployment.chart_deployer import (
    ChartCatalog,
    ChartDeployer,
    DeployRequest,
)
from rops.cli.deployment.shell_commands import ExecutionOutcome, ShellCommands
from rops.config.settings import BlockSettings, ChartsSettings, Settings
from rops.errors import ChartNotFoundError, ConfigError, ExternalToolError

OK = ExecutionOutcome(success=True, returncode=0)
FAILED = ExecutionOutcome(success=False, returncode=1, error_lines=2)

BLOCK = {
    "name": "payments",
    "upstream": "http://payments:8080",
    "routes": [{"name": "api", "protocols": ["https"], "paths": ["/pay"]}],
}


@pytest.fixture
def catalog() -> ChartCatalog:
    return ChartCatalog.model_validate(
        {
            "payments": {
                "chart": "quantmind/payments",
                "namespace": "chart-ns",
                "helm-repos": {"quantmind": "https://charts.quantmind.com"},
                "git-repos": {"payments-config": "git@github.com:q/payments.git"},
                "block": BLOCK,
            },
            "plain": {"chart": "./charts/plain", "alias": "web", "append-namespace": False},
        }
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        charts=ChartsSettings(
            envs={"prod": "cluster-a", "dev": "cluster-b"},
            default_namespace="services",
        ),
        blocks=BlockSettings(default_space="metablock"),
    )


@pytest.fixture
def runner() -> MagicMock:
    """Mock CommandRunner that reports success for every command."""
    mock = MagicMock()
    mock.cwd = None
    mock.execute.return_value = OK
    return mock


@pytest.fixture
def metablock() -> MagicMock:
    client = MagicMock()
    client.__enter__.return_value = client
    return client


@pytest.fixture
def deployer(settings, runner, metablock) -> ChartDeployer:
    return ChartDeployer(
        settings,
        ShellCommands(runner=runner),
        MagicMock(),
        metablock_factory=lambda: metablock,
    )


def executed(runner: MagicMock) -> list[list[str]]:
    """argv of every command passed to the runner, in order."""
    return [c.args[0].argv for c in runner.execute.call_args_list]


def value_files(argv: list[str]) -> list[str]:
    return [argv[i + 1] for i, arg in enumerate(argv) if arg == "-f"]


class TestResolve:
    """Tests for namespace, environment and chart resolution."""

    def test_request_namespace_wins(self, deployer, catalog) -> None:
        plan = deployer.resolve(
            DeployRequest(chart="payments", namespace="staging"), catalog
        )
        assert plan.namespace == "staging"

    def test_chart_namespace_before_default(self, deployer, catalog) -> None:
        plan = deployer.resolve(DeployRequest(chart="payments"), catalog)
        assert plan.namespace == "chart-ns"

    def test_global_default_namespace(self, deployer, catalog) -> None:
        plan = deployer.resolve(DeployRequest(chart="plain"), catalog)
        assert plan.namespace == "services"

    def test_env_defaults_to_prod(self, deployer, catalog) -> None:
        plan = deployer.resolve(DeployRequest(chart="payments"), catalog)
        assert plan.env == "prod"
        assert plan.cluster == "cluster-a"

    def test_unknown_env_lists_available(self, deployer, catalog) -> None:
        with pytest.raises(ConfigError) as excinfo:
            deployer.resolve(DeployRequest(chart="payments", env="qa"), catalog)

        assert excinfo.value.message == (
            "Environment 'qa' not found in charts settings - available are prod, dev"
        )

    def test_unknown_chart(self, deployer, catalog) -> None:
        with pytest.raises(ChartNotFoundError, match="Chart 'nope' not found"):
            deployer.resolve(DeployRequest(chart="nope"), catalog)

    def test_release_name_appends_namespace(self, deployer, catalog) -> None:
        plan = deployer.resolve(DeployRequest(chart="payments", env="dev"), catalog)
        assert plan.release_name == "payments-chart-ns"

    def test_release_name_uses_alias(self, deployer, catalog) -> None:
        plan = deployer.resolve(DeployRequest(chart="plain"), catalog)
        assert plan.release_name == "web"


class TestBuildUpgradeCommand:
    """Tests for helm upgrade command composition."""

    def test_without_vars(self, deployer, catalog) -> None:
        request = DeployRequest(chart="payments", namespace="staging")
        plan = deployer.resolve(request, catalog)

        command = deployer.build_upgrade_command(plan, request)

        assert command.argv == [
            "helm",
            "upgrade",
            "payments-staging",
            "quantmind/payments",
            "--install",
            "--namespace",
            "staging",
        ]
        assert command.env == ()

    def test_vars_with_chart_directory(self, deployer, catalog, tmp_path) -> None:
        (tmp_path / "vars" / "prod" / "payments").mkdir(parents=True)
        request = DeployRequest(chart="payments", vars=str(tmp_path / "vars"))
        plan = deployer.resolve(request, catalog)
        root = (tmp_path / "vars").resolve() / "prod"

        command = deployer.build_upgrade_command(plan, request)

        assert command.args[0] == "secrets"
        assert command.env == (("DECRYPT_CHARTS", "true"),)
        assert value_files(command.argv) == [
            str(root / "values.yaml"),
            str(root / "secrets.yaml"),
            str(root / "payments" / "values.yaml"),
            str(root / "payments" / "secrets.yaml"),
        ]

    def test_vars_without_chart_directory(self, deployer, catalog, tmp_path) -> None:
        (tmp_path / "vars" / "prod").mkdir(parents=True)
        request = DeployRequest(chart="payments", vars=str(tmp_path / "vars"))
        plan = deployer.resolve(request, catalog)

        command = deployer.build_upgrade_command(plan, request)

        assert [Path(f).name for f in value_files(command.argv)] == [
            "values.yaml",
            "secrets.yaml",
        ]

    def test_configured_vars_used_when_not_overridden(
        self, settings, runner, catalog, tmp_path
    ) -> None:
        settings.charts.vars = str(tmp_path)
        deployer = ChartDeployer(settings, ShellCommands(runner=runner), MagicMock())
        request = DeployRequest(chart="plain", env="dev")

        plan = deployer.resolve(request, catalog)

        assert plan.vars_path == tmp_path.resolve() / "dev"

    def test_overrides_args_and_wait_order(self, deployer, catalog) -> None:
        request = DeployRequest(
            chart="plain",
            set_values=("image.tag=1.2.3", "replicas=2"),
            args=("--timeout", "10m"),
            wait=True,
        )
        plan = deployer.resolve(request, catalog)

        command = deployer.build_upgrade_command(plan, request)

        assert command.argv[-8:] == [
            "services",
            "--set",
            "image.tag=1.2.3",
            "--set",
            "replicas=2",
            "--timeout",
            "10m",
            "--wait",
        ]


class TestDeploy:
    """Tests for the full pipeline."""

    def test_steps_run_in_order(
        self, deployer, catalog, runner, metablock, monkeypatch, tmp_path
    ) -> None:
        monkeypatch.chdir(tmp_path)

        deployer.deploy(DeployRequest(chart="payments"), catalog)

        assert executed(runner) == [
            ["git", "clone", "git@github.com:q/payments.git", "payments-config"],
            ["helm", "repo", "add", "quantmind", "https://charts.quantmind.com"],
            ["aws", "eks", "update-kubeconfig", "--name", "cluster-a"],
            [
                "helm",
                "upgrade",
                "payments-chart-ns",
                "quantmind/payments",
                "--install",
                "--namespace",
                "chart-ns",
            ],
        ]
        metablock.apply.assert_called_once()

    def test_git_clone_replaces_existing_directory(
        self, deployer, catalog, monkeypatch, tmp_path
    ) -> None:
        monkeypatch.chdir(tmp_path)
        stale = tmp_path / "payments-config"
        stale.mkdir()
        (stale / "old.txt").write_text("stale")

        deployer.deploy(DeployRequest(chart="payments"), catalog)

        assert not stale.exists()

    def test_dry_run_reaches_cluster_and_upgrade_only(
        self, deployer, catalog, runner, monkeypatch, tmp_path
    ) -> None:
        monkeypatch.chdir(tmp_path)

        deployer.deploy(DeployRequest(chart="payments", dry_run=True), catalog)

        dry_runs = [
            c.kwargs.get("dry_run", False) for c in runner.execute.call_args_list
        ]
        assert dry_runs == [False, False, True, True]

    def test_block_synced_with_default_space(
        self, deployer, catalog, metablock, monkeypatch, tmp_path
    ) -> None:
        monkeypatch.chdir(tmp_path)
        metablock.apply.return_value.full_name = "metablock/payments"

        block = deployer.deploy(DeployRequest(chart="payments"), catalog)

        config, space = metablock.apply.call_args.args
        assert config.name == "payments"
        assert space == "metablock"
        assert block.full_name == "metablock/payments"

    def test_chart_without_block(self, deployer, catalog, metablock) -> None:
        assert deployer.deploy(DeployRequest(chart="plain"), catalog) is None
        metablock.apply.assert_not_called()

    def test_block_only_skips_helm(self, deployer, catalog, runner, metablock) -> None:
        deployer.deploy(
            DeployRequest(chart="payments", block_only=True, env="unknown"), catalog
        )

        runner.execute.assert_not_called()
        metablock.apply.assert_called_once()

    def test_block_only_requires_chart(self, deployer, catalog) -> None:
        with pytest.raises(ChartNotFoundError):
            deployer.deploy(DeployRequest(chart="nope", block_only=True), catalog)

    def test_failed_upgrade_aborts_before_block(
        self, deployer, catalog, runner, metablock, monkeypatch, tmp_path
    ) -> None:
        monkeypatch.chdir(tmp_path)
        runner.execute.side_effect = [OK, OK, OK, FAILED]

        with pytest.raises(ExternalToolError) as excinfo:
            deployer.deploy(DeployRequest(chart="payments"), catalog)

        assert excinfo.value.message == "Failed to deploy chart 'payments-chart-ns'"
        metablock.apply.assert_not_called()

    def test_failed_kubeconfig_aborts_upgrade(
        self, deployer, catalog, runner, monkeypatch, tmp_path
    ) -> None:
        monkeypatch.chdir(tmp_path)
        runner.execute.side_effect = [OK, OK, FAILED]

        with pytest.raises(
            ExternalToolError,
            match="Failed to update kubeconfig for cluster 'cluster-a'",
        ):
            deployer.deploy(DeployRequest(chart="payments"), catalog)

        assert runner.execute.call_count == 3

    def test_failed_repo_add(
        self, deployer, catalog, runner, monkeypatch, tmp_path
    ) -> None:
        monkeypatch.chdir(tmp_path)
        runner.execute.side_effect = [OK, FAILED]

        with pytest.raises(ExternalToolError, match="Failed to add Helm repo 'quantmind'"):
            deployer.deploy(DeployRequest(chart="payments"), catalog)

    def test_failed_clone(self, deployer, catalog, runner, monkeypatch, tmp_path) -> None:
        monkeypatch.chdir(tmp_path)
        runner.execute.return_value = FAILED

        with pytest.raises(ExternalToolError, match="Failed to clone Git repo"):
            deployer.deploy(DeployRequest(chart="payments"), catalog)

        assert runner.execute.call_count == 1

    def test_unknown_env_fails_before_any_command(
        self, deployer, catalog, runner
    ) -> None:
        with pytest.raises(ConfigError):
            deployer.deploy(DeployRequest(chart="payments", env="qa"), catalog)

        runner.execute.assert_not_called()
