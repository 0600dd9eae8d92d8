"""Tests for the checkpoint store."""

from datetime import datetime

import pytest

from task_orchestrator.config import OrchestratorSettings, SettingsContext
from task_orchestrator.errors import InvalidStateError
from task_orchestrator.planning import CheckpointStore, TaskTreeStore


class TestCreateCheckpoint:
    def test_sequential_ids(self, plan, checkpoints):
        assert checkpoints.create_checkpoint("first") == {"checkpoint_id": "cp_1"}
        assert checkpoints.create_checkpoint("second") == {"checkpoint_id": "cp_2"}
        assert len(checkpoints) == 2

    def test_stores_snapshot_and_metadata(self, plan, checkpoints):
        checkpoints.create_checkpoint("start", "plan before work")

        cp = checkpoints.get_checkpoint("cp_1")
        assert cp.name == "start"
        assert cp.description == "plan before work"
        assert cp.state == plan.get_plan_state()
        assert isinstance(cp.timestamp, datetime)

    def test_isolated_from_live_plan(self, plan, checkpoints):
        checkpoints.create_checkpoint("start")
        before = checkpoints.get_checkpoint("cp_1").state

        plan.add_task("Later")
        plan.update_task("2", status="completed", notes="changed")

        assert checkpoints.get_checkpoint("cp_1").state == before

    def test_reader_cannot_mutate_stored_state(self, plan, checkpoints):
        checkpoints.create_checkpoint("start")
        checkpoints.get_checkpoint("cp_1").state["subtasks"].clear()

        assert len(checkpoints.get_checkpoint("cp_1").state["subtasks"]) == 2

    def test_without_plan_stores_error_state(self, tree, checkpoints):
        checkpoints.create_checkpoint("empty")
        assert checkpoints.get_checkpoint("cp_1").state == {"error": "No plan active"}

    def test_deep_plan_round_trip(self, tree, checkpoints):
        tree.create_plan("Deep")
        parent = "1"
        for depth in range(1500):
            tree.add_task(f"Level {depth}", parent_id=parent)
            parent = str(len(tree))
        checkpoints.create_checkpoint("deep")
        tree.create_plan("Other")

        assert checkpoints.get_checkpoint("cp_1").state["id"] == "1"
        assert checkpoints.restore_checkpoint("cp_1").success
        assert len(tree) == 1501
        assert tree.get_task("1501").parent_id == "1500"


class TestListCheckpoints:
    def test_creation_order(self, plan, checkpoints):
        checkpoints.create_checkpoint("a", "first one")
        checkpoints.create_checkpoint("b")

        assert checkpoints.list_checkpoints() == [
            {"id": "cp_1", "name": "a", "description": "first one"},
            {"id": "cp_2", "name": "b", "description": None},
        ]

    def test_empty(self, checkpoints):
        assert checkpoints.list_checkpoints() == []


class TestRestoreCheckpoint:
    def test_restore_by_id_drops_later_tasks(self, tree, checkpoints):
        tree.create_plan("Build X")
        tree.add_task("Step A")
        checkpoints.create_checkpoint("cp1")
        tree.add_task("Step B")

        result = checkpoints.restore_checkpoint("cp_1")

        assert result.success
        assert result.message == 'Checkpoint "cp1" restored successfully.'
        assert result.checkpoint_id == "cp_1"
        assert len(tree) == 2
        assert tree.get_task("3") is None

    def test_restore_is_repeatable(self, plan, checkpoints):
        checkpoints.create_checkpoint("start")
        snapshot = plan.get_plan_state()

        checkpoints.restore_checkpoint("cp_1")
        plan.update_task("2", status="failed")
        checkpoints.restore_checkpoint("cp_1")

        assert plan.get_plan_state() == snapshot

    def test_unknown_id(self, plan, checkpoints):
        checkpoints.create_checkpoint("start", "start of plan")

        result = checkpoints.restore_checkpoint("cp_9")

        assert not result.success
        assert result.message == "Checkpoint cp_9 not found."

    def test_id_takes_precedence_without_fuzzy_fallback(self, plan, checkpoints):
        checkpoints.create_checkpoint("start", "start of plan")

        result = checkpoints.restore_checkpoint("cp_9", description="start of plan")

        assert not result.success
        assert "cp_9" in result.message

    def test_restore_by_description(self, tree, checkpoints):
        tree.create_plan("Migrate database")
        checkpoints.create_checkpoint("before-schema", "plan before schema migration work")
        tree.add_task("Rewrite schema")
        checkpoints.create_checkpoint("after-schema", "schema rewritten, data copy next")

        result = checkpoints.restore_checkpoint(description="before schema migration")

        assert result.success
        assert result.checkpoint_id == "cp_1"
        assert len(tree) == 1

    def test_description_without_match(self, plan, checkpoints):
        checkpoints.create_checkpoint("start", "initial plan layout")

        result = checkpoints.restore_checkpoint(description="deploy kubernetes cluster")

        assert not result.success
        assert result.message == "No checkpoint found matching: deploy kubernetes cluster"

    def test_match_must_exceed_threshold(self, plan):
        store = CheckpointStore(plan, scorer=lambda query, text: 0.3)
        store.create_checkpoint("start")

        assert not store.restore_checkpoint(description="anything").success

        lenient = CheckpointStore(plan, scorer=lambda query, text: 0.3, match_threshold=0.2)
        lenient.create_checkpoint("start")
        assert lenient.restore_checkpoint(description="anything").success

    def test_threshold_from_settings(self, plan):
        with SettingsContext(OrchestratorSettings(_env_file=None, checkpoint_match_threshold=0.9)):
            store = CheckpointStore(plan, scorer=lambda query, text: 0.5)
        store.create_checkpoint("start")

        assert not store.restore_checkpoint(description="start").success

    def test_ties_pick_earliest(self, plan):
        store = CheckpointStore(plan, scorer=lambda query, text: 0.8)
        store.create_checkpoint("one")
        store.create_checkpoint("two")

        assert store.restore_checkpoint(description="either").checkpoint_id == "cp_1"

    def test_scorer_receives_name_and_description(self, plan):
        seen = []

        def scorer(query, text):
            seen.append((query, text))
            return 0.0

        store = CheckpointStore(plan, scorer=scorer)
        store.create_checkpoint("start", "the beginning")
        store.create_checkpoint("bare")
        store.restore_checkpoint(description="query")

        assert seen == [("query", "start the beginning"), ("query", "bare")]

    def test_invalid_state_is_reported(self, tree, checkpoints):
        checkpoints.create_checkpoint("empty")
        tree.create_plan("Later plan")

        result = checkpoints.restore_checkpoint("cp_1")

        assert not result.success
        assert result.message == 'Checkpoint "empty" has invalid state.'
        assert tree.get_task("1").description == "Later plan"

    def test_tree_errors_become_results(self, plan):
        class BrokenTree(TaskTreeStore):
            def restore_state(self, state):
                raise InvalidStateError("corrupt")

        broken = BrokenTree()
        broken.create_plan("Goal")
        store = CheckpointStore(broken)
        store.create_checkpoint("start")

        result = store.restore_checkpoint("cp_1")

        assert not result.success
        assert result.message == "Error restoring checkpoint: Invalid state to restore: corrupt"

    def test_neither_id_nor_description(self, plan, checkpoints):
        checkpoints.create_checkpoint("start")
        assert not checkpoints.restore_checkpoint().success

    def test_to_dict(self, plan, checkpoints):
        checkpoints.create_checkpoint("a")
        assert checkpoints.restore_checkpoint("cp_1").to_dict() == {
            "success": True,
            "message": 'Checkpoint "a" restored successfully.',
            "checkpoint_id": "cp_1",
        }


class TestClear:
    def test_clear_resets_ids(self, plan, checkpoints):
        checkpoints.create_checkpoint("a")
        checkpoints.create_checkpoint("b")
        checkpoints.clear()

        assert checkpoints.list_checkpoints() == []
        assert checkpoints.get_checkpoint("cp_1") is None
        assert checkpoints.create_checkpoint("c") == {"checkpoint_id": "cp_1"}


@pytest.mark.parametrize("bad_id", ["", None])
def test_falsy_id_falls_through_to_description(plan, bad_id):
    store = CheckpointStore(plan, scorer=lambda query, text: 1.0)
    store.create_checkpoint("start")

    assert store.restore_checkpoint(bad_id, description="start").success
