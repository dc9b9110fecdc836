"""
Tests for the stepwise command-line interface.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from stepwise.cli import create_parser, read_steps, run
from stepwise.errors import StepFileError


class TestCreateParser:
    """Test argument parsing."""

    def test_plan_command(self) -> None:
        """Several steps can be planned at once."""
        args = create_parser().parse_args(["plan", "When I click Save", "Then I should see 'Saved'"])

        assert args.command == "plan"
        assert len(args.steps) == 2
        assert args.no_intelligence is False

    def test_global_options(self) -> None:
        """Options come before the command."""
        args = create_parser().parse_args(["--no-intelligence", "--debug", "supported", "When I click Save"])

        assert args.no_intelligence is True
        assert args.debug is True
        assert args.step == "When I click Save"

    def test_command_required(self) -> None:
        """A command is mandatory."""
        with pytest.raises(SystemExit):
            create_parser().parse_args([])


class TestReadSteps:
    """Test reading step files."""

    def test_feature_file(self, tmp_path: Path) -> None:
        """Only keyword lines are steps."""
        feature = tmp_path / "login.feature"
        feature.write_text(
            "Feature: Login\n"
            "  Scenario: Valid user\n"
            '    Given I navigate to "https://example.com"\n'
            '    When I enter "bob" in Username\n'
            "    # a comment\n"
            '    And I click "Login"\n'
        )

        assert read_steps(feature) == [
            'Given I navigate to "https://example.com"',
            'When I enter "bob" in Username',
            'And I click "Login"',
        ]

    def test_yaml_file(self, tmp_path: Path) -> None:
        """YAML files provide a 'steps' list."""
        steps = tmp_path / "steps.yaml"
        steps.write_text('steps:\n  - When I click "Save"\n  - ""\n  - Then I should see "Saved"\n')

        assert read_steps(steps) == ['When I click "Save"', 'Then I should see "Saved"']

    def test_yaml_without_steps(self, tmp_path: Path) -> None:
        """A YAML file without a list is rejected."""
        steps = tmp_path / "steps.yml"
        steps.write_text("name: nothing here\n")

        with pytest.raises(StepFileError, match="no 'steps' list"):
            read_steps(steps)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Broken YAML is reported as a step file error."""
        steps = tmp_path / "steps.yaml"
        steps.write_text("steps: [unclosed\n")

        with pytest.raises(StepFileError, match="Invalid YAML"):
            read_steps(steps)

    def test_missing_file(self, tmp_path: Path) -> None:
        """Unreadable files are reported."""
        with pytest.raises(StepFileError, match="Cannot read step file"):
            read_steps(tmp_path / "nope.feature")


class TestRun:
    """Test command execution."""

    def test_plan_prints_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A single step prints one plan object."""
        args = create_parser().parse_args(["plan", 'When I click "Submit" button'])

        assert run(args) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["action_type"] == "click"
        assert data["element_name"] == "Submit"
        assert data["locator_strategy"] == "intelligent"

    def test_plan_without_intelligence(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The pattern cascade answers when the intent pipeline is off."""
        args = create_parser().parse_args(["--no-intelligence", "plan", 'When I click "Submit" button'])

        assert run(args) == 0
        assert json.loads(capsys.readouterr().out)["locator_strategy"] == "regex-smart"

    def test_plan_unknown_step_fails(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Unresolved steps give a non-zero exit code."""
        args = create_parser().parse_args(["plan", "When I teleport to the moon"])

        assert run(args) == 1
        assert json.loads(capsys.readouterr().out)["action_type"] == "unknown"

    def test_plan_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """File plans are printed as a list."""
        feature = tmp_path / "one.feature"
        feature.write_text('Feature: x\n  Scenario: y\n    When I click "Submit" button\n')
        args = create_parser().parse_args(["plan-file", str(feature)])

        assert run(args) == 0
        plans = json.loads(capsys.readouterr().out)
        assert isinstance(plans, list)
        assert plans[0]["action_type"] == "click"

    @pytest.mark.parametrize(
        ("step", "code", "output"),
        [
            ('When I click "Submit" button', 0, "supported"),
            ("When I teleport to the moon", 1, "unsupported"),
        ],
    )
    def test_supported(self, step: str, code: int, output: str, capsys: pytest.CaptureFixture[str]) -> None:
        """The exit code reports support."""
        args = create_parser().parse_args(["supported", step])

        assert run(args) == code
        assert capsys.readouterr().out.strip() == output

    def test_unsupported_step_lists_suggestions(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Unsupported steps are followed by supported rewrites."""
        args = create_parser().parse_args(
            ["--no-intelligence", "supported", 'When I put "John" into the First Name box']
        )

        assert run(args) == 1
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "unsupported"
        assert lines[1] == "Did you mean:"
        assert any('When I fill First Name with "John"' in line for line in lines[2:])
