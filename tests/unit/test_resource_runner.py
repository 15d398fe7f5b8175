import pytest

from edgegrid_provider.client.appsec import (
    GetConfigurationRequest,
    GetConfigurationResponse,
    GetPenaltyBoxRequest,
    PenaltyBoxResponse,
    UpdatePenaltyBoxRequest,
)
from edgegrid_provider.errors import ApiError, ApiNotFoundError
from edgegrid_provider.plugins.resource.runner import ResourceRunner
from edgegrid_provider.providers.appsec.penalty_box import PenaltyBox

KEY = {"config_id": 43253, "version": 7, "policy_id": "AAAA_81230"}
RESOURCE_ID = "43253:7:AAAA_81230"


def resource_state(action="deny", protection=True):
    return {
        "config_id": 43253,
        "version": 7,
        "security_policy_id": "AAAA_81230",
        "penalty_box_protection": protection,
        "penalty_box_action": action,
    }


@pytest.fixture
def penalty_box_params(mock_ansible_module):
    mock_ansible_module.params.update(
        {
            "state": "present",
            "id": None,
            "config_id": 43253,
            "version": 7,
            "security_policy_id": "AAAA_81230",
            "penalty_box_protection": True,
            "penalty_box_action": "deny",
        }
    )
    return mock_ansible_module.params


def expect_read(appsec, action="deny", protection=True):
    appsec.expect(
        "get_penalty_box",
        GetPenaltyBoxRequest(**KEY),
        returns=PenaltyBoxResponse(action=action, penalty_box_protection=protection),
    )


def expect_read_missing(appsec):
    appsec.expect(
        "get_penalty_box",
        GetPenaltyBoxRequest(**KEY),
        raises=ApiNotFoundError("Not Found", status=404),
    )


def expect_latest_version(appsec, version=7):
    appsec.expect(
        "get_configuration",
        GetConfigurationRequest(config_id=43253),
        returns=GetConfigurationResponse(id=43253, latest_version=version),
    )


class TestResourceRunner:
    """
    Test suite for the ResourceRunner state handling.
    """

    # --- Scenario 1: Create a new object ---
    def test_create_when_missing(
        self, mock_ansible_module, penalty_box_params, context, appsec
    ):
        # Arrange
        expect_read_missing(appsec)
        appsec.expect(
            "update_penalty_box",
            UpdatePenaltyBoxRequest(**KEY, action="deny", penalty_box_protection=True),
        )
        expect_read(appsec)
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        mock_ansible_module.exit_json.assert_called_once_with(
            changed=True, id=RESOURCE_ID, resource=resource_state()
        )
        mock_ansible_module.fail_json.assert_not_called()

    # --- Scenario 2: Existing object already matches ---
    def test_no_change_when_state_matches(
        self, mock_ansible_module, penalty_box_params, context, appsec
    ):
        # Arrange
        expect_read(appsec)
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        mock_ansible_module.exit_json.assert_called_once_with(
            changed=False, id=RESOURCE_ID, resource=resource_state()
        )

    # --- Scenario 3: Existing object differs ---
    def test_update_when_state_differs(
        self, mock_ansible_module, penalty_box_params, context, appsec
    ):
        # Arrange
        expect_read(appsec, action="alert")
        appsec.expect(
            "update_penalty_box",
            UpdatePenaltyBoxRequest(**KEY, action="deny", penalty_box_protection=True),
        )
        expect_read(appsec)
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        mock_ansible_module.exit_json.assert_called_once_with(
            changed=True, id=RESOURCE_ID, resource=resource_state()
        )

    def test_update_failure_reports_last_known_state(
        self, mock_ansible_module, penalty_box_params, context, appsec
    ):
        # Arrange
        expect_read(appsec, action="alert")
        appsec.expect(
            "update_penalty_box",
            UpdatePenaltyBoxRequest(**KEY, action="deny", penalty_box_protection=True),
            raises=ApiError("Internal Server Error", status=500),
        )
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        mock_ansible_module.exit_json.assert_not_called()
        _, kwargs = mock_ansible_module.fail_json.call_args
        assert "update_penalty_box" in kwargs["msg"]
        assert "Internal Server Error" in kwargs["msg"]
        assert kwargs["id"] == RESOURCE_ID
        assert kwargs["resource"] == resource_state(action="alert")

    # --- Scenario 4: Delete by explicit id ---
    def test_delete_by_id(self, mock_ansible_module, context, appsec):
        # Arrange
        mock_ansible_module.params.update({"state": "absent", "id": RESOURCE_ID})
        expect_read(appsec)
        appsec.expect(
            "update_penalty_box",
            UpdatePenaltyBoxRequest(**KEY, action="none", penalty_box_protection=False),
        )
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        mock_ansible_module.exit_json.assert_called_once_with(
            changed=True, id=None, resource=None
        )

    def test_delete_failure_keeps_id(self, mock_ansible_module, context, appsec):
        # Arrange
        mock_ansible_module.params.update({"state": "absent", "id": RESOURCE_ID})
        expect_read(appsec)
        appsec.expect(
            "update_penalty_box",
            UpdatePenaltyBoxRequest(**KEY, action="none", penalty_box_protection=False),
            raises=ApiError("Conflict", status=409),
        )
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        mock_ansible_module.exit_json.assert_not_called()
        _, kwargs = mock_ansible_module.fail_json.call_args
        assert kwargs["id"] == RESOURCE_ID
        assert kwargs["resource"] == resource_state()
        assert runner.current.id == RESOURCE_ID

    def test_absent_and_missing_is_a_no_op(
        self, mock_ansible_module, penalty_box_params, context, appsec
    ):
        # Arrange
        penalty_box_params["state"] = "absent"
        expect_read_missing(appsec)
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        mock_ansible_module.exit_json.assert_called_once_with(
            changed=False, id=None, resource=None
        )

    def test_explicit_id_that_is_missing_fails(self, mock_ansible_module, context, appsec):
        mock_ansible_module.params.update({"state": "absent", "id": RESOURCE_ID})
        expect_read_missing(appsec)
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        runner.run()

        mock_ansible_module.exit_json.assert_not_called()
        mock_ansible_module.fail_json.assert_called_once()

    def test_malformed_id_fails_without_upstream_calls(
        self, mock_ansible_module, context, appsec
    ):
        # Arrange
        mock_ansible_module.params.update({"state": "absent", "id": "43253:seven"})
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        _, kwargs = mock_ansible_module.fail_json.call_args
        assert "43253:seven" in kwargs["msg"]
        assert appsec.calls == []

    def test_create_failure_reports_no_id(
        self, mock_ansible_module, penalty_box_params, context, appsec
    ):
        # Arrange
        expect_read_missing(appsec)
        appsec.expect(
            "update_penalty_box",
            UpdatePenaltyBoxRequest(**KEY, action="deny", penalty_box_protection=True),
            raises=ApiError("Forbidden", status=403),
        )
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        _, kwargs = mock_ansible_module.fail_json.call_args
        assert kwargs["id"] is None
        assert kwargs["resource"] is None


class TestResourceRunnerCheckMode:
    def test_predicts_create_without_writing(
        self, mock_ansible_module, penalty_box_params, context, appsec
    ):
        # Arrange
        mock_ansible_module.check_mode = True
        expect_read_missing(appsec)
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        mock_ansible_module.exit_json.assert_called_once_with(
            changed=True, id=None, resource=None
        )
        assert [method for method, _ in appsec.calls] == ["get_penalty_box"]

    @pytest.mark.parametrize("current_action, changed", [("alert", True), ("deny", False)])
    def test_predicts_update(
        self,
        mock_ansible_module,
        penalty_box_params,
        context,
        appsec,
        current_action,
        changed,
    ):
        # Arrange
        mock_ansible_module.check_mode = True
        expect_read(appsec, action=current_action)
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        mock_ansible_module.exit_json.assert_called_once_with(
            changed=changed,
            id=RESOURCE_ID,
            resource=resource_state(action=current_action),
        )

    def test_predicts_delete(self, mock_ansible_module, context, appsec):
        mock_ansible_module.check_mode = True
        mock_ansible_module.params.update({"state": "absent", "id": RESOURCE_ID})
        expect_read(appsec)
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        runner.run()

        _, kwargs = mock_ansible_module.exit_json.call_args
        assert kwargs["changed"] is True
        assert kwargs["id"] == RESOURCE_ID


class TestResourceRunnerWithoutVersion:
    """
    Objects of versioned configurations are addressed through the latest
    version when the caller leaves `version` out.
    """

    @pytest.fixture(autouse=True)
    def unversioned_params(self, penalty_box_params):
        penalty_box_params["version"] = None
        return penalty_box_params

    def test_absent_resets_the_latest_version(
        self, mock_ansible_module, context, appsec
    ):
        # Arrange
        mock_ansible_module.params["state"] = "absent"
        expect_latest_version(appsec)
        expect_read(appsec)
        appsec.expect(
            "update_penalty_box",
            UpdatePenaltyBoxRequest(**KEY, action="none", penalty_box_protection=False),
        )
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        mock_ansible_module.exit_json.assert_called_once_with(
            changed=True, id=None, resource=None
        )
        mock_ansible_module.fail_json.assert_not_called()

    def test_second_identical_run_reports_no_change(
        self, mock_ansible_module, context, appsec
    ):
        # Arrange
        expect_latest_version(appsec)
        expect_read(appsec, action="alert")
        appsec.expect(
            "update_penalty_box",
            UpdatePenaltyBoxRequest(**KEY, action="deny", penalty_box_protection=True),
        )
        expect_read(appsec)
        expect_latest_version(appsec)
        expect_read(appsec)

        # Act
        ResourceRunner(mock_ansible_module, PenaltyBox(context)).run()
        first = mock_ansible_module.exit_json.call_args
        mock_ansible_module.exit_json.reset_mock()
        ResourceRunner(mock_ansible_module, PenaltyBox(context)).run()
        second = mock_ansible_module.exit_json.call_args

        # Assert
        assert first.kwargs == {
            "changed": True,
            "id": RESOURCE_ID,
            "resource": resource_state(),
        }
        assert second.kwargs == {
            "changed": False,
            "id": RESOURCE_ID,
            "resource": resource_state(),
        }
        writes = [method for method, _ in appsec.calls if method.startswith("update_")]
        assert writes == ["update_penalty_box"]

    def test_create_writes_to_a_modifiable_version(
        self, mock_ansible_module, context, appsec
    ):
        # Arrange
        expect_latest_version(appsec)
        expect_read_missing(appsec)
        expect_latest_version(appsec)
        appsec.expect(
            "update_penalty_box",
            UpdatePenaltyBoxRequest(**KEY, action="deny", penalty_box_protection=True),
        )
        expect_read(appsec)
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        mock_ansible_module.exit_json.assert_called_once_with(
            changed=True, id=RESOURCE_ID, resource=resource_state()
        )

    def test_latest_version_failure_is_reported(
        self, mock_ansible_module, context, appsec
    ):
        # Arrange
        appsec.expect(
            "get_configuration",
            GetConfigurationRequest(config_id=43253),
            raises=ApiNotFoundError("Not Found", status=404),
        )
        runner = ResourceRunner(mock_ansible_module, PenaltyBox(context))

        # Act
        runner.run()

        # Assert
        mock_ansible_module.exit_json.assert_not_called()
        _, kwargs = mock_ansible_module.fail_json.call_args
        assert "get_configuration" in kwargs["msg"]
