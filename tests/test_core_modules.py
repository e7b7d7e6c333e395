import tempfile
import textwrap
import unittest
from pathlib import Path

from lernscope.core.config import DuplicatePolicy, ReviewConfig, load_review_config
from lernscope.core.submissions import JsonlSubmissionStore, SubmissionRecord


def _record(**overrides) -> dict:
    record = {
        "first_name": "Ana",
        "last_name": "Pérez",
        "student_name": "Ana Pérez",
        "level": "aleman1",
        "week_id": "w01",
        "session_id": "aleman1-w01",
        "content": "Hallo, ich bin Ana.",
        "feedback": "<p>Gut!</p>",
    }
    record.update(overrides)
    return record


class ConfigTests(unittest.TestCase):
    def test_defaults_apply_without_file(self) -> None:
        config = ReviewConfig()

        self.assertIsNone(config.registry.data_dir)
        self.assertEqual(config.registry.duplicate_policy, DuplicatePolicy.LAST_WINS)
        self.assertEqual((config.registry.min_week, config.registry.max_week), (1, 12))
        self.assertEqual(config.log_level, "INFO")

    def test_programmatic_paths_stay_relative(self) -> None:
        config = ReviewConfig.model_validate(
            {"registry": {"data_dir": "weeks"}, "store": {"submissions_path": "rel.jsonl"}}
        )

        self.assertEqual(config.registry.data_dir, Path("weeks"))
        self.assertEqual(config.store.submissions_path, Path("rel.jsonl"))

    def test_home_is_expanded_in_paths(self) -> None:
        config = ReviewConfig.model_validate({"store": {"submissions_path": "~/log.jsonl"}})

        self.assertEqual(config.store.submissions_path, Path.home() / "log.jsonl")

    def test_load_review_config_resolves_relative_paths(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            config_path = root / "config" / "review.yaml"
            config_path.parent.mkdir()
            config_path.write_text(
                textwrap.dedent(
                    """
                    registry:
                      data_dir: weeks
                      duplicate_policy: reject
                      max_week: 16
                    store:
                      submissions_path: outputs/log.jsonl
                    log_level: debug
                    """
                ),
                encoding="utf-8",
            )

            config = load_review_config(config_path, base_dir=root)

            self.assertEqual(config.registry.data_dir, (root / "weeks").resolve())
            self.assertEqual(config.registry.duplicate_policy, DuplicatePolicy.REJECT)
            self.assertEqual(config.registry.max_week, 16)
            self.assertEqual(config.store.submissions_path, (root / "outputs" / "log.jsonl").resolve())
            self.assertEqual(config.log_level, "DEBUG")

    def test_paths_default_to_config_folder(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "review.yaml"
            config_path.write_text("registry:\n  data_dir: weeks\n", encoding="utf-8")

            config = load_review_config(config_path)

            self.assertEqual(config.registry.data_dir, (Path(tmpdir) / "weeks").resolve())

    def test_invalid_config_raises_value_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "review.yaml"
            config_path.write_text("registry:\n  min_week: 5\n  max_week: 2\n", encoding="utf-8")

            with self.assertRaises(ValueError):
                load_review_config(config_path)

    def test_unknown_log_level_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ReviewConfig(log_level="chatty")

    def test_non_mapping_root_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "review.yaml"
            config_path.write_text("- just\n- a list\n", encoding="utf-8")

            with self.assertRaises(ValueError):
                load_review_config(config_path)


class SubmissionStoreTests(unittest.TestCase):
    def test_save_appends_json_lines(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "submissions.jsonl"
            store = JsonlSubmissionStore(path)

            stored = store.save(_record())
            store.extend([SubmissionRecord(**_record(first_name="Luis", student_name="Luis Pérez"))])

            self.assertTrue(path.exists())
            self.assertEqual(len(path.read_text(encoding="utf-8").splitlines()), 2)
            self.assertIsInstance(stored, SubmissionRecord)
            self.assertEqual(stored.submission_type, "written")
            self.assertEqual(stored.activity_mode, "guided")

            records = store.read_all()
            self.assertEqual([record.first_name for record in records], ["Ana", "Luis"])
            self.assertEqual(records[0].session_id, "aleman1-w01")

    def test_read_all_on_missing_file_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            store = JsonlSubmissionStore(Path(tmpdir) / "submissions.jsonl")
            self.assertEqual(store.read_all(), [])


if __name__ == "__main__":
    unittest.main()
