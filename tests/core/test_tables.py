"""
Tests for loading the connector rule table and the topic table from JSON files.

Files are written to pytest's `tmp_path`, so nothing outside the test's own temporary
directory is read. The shipped files under `config/` are also loaded to make sure they
parse into the same tables as the built-in defaults.
"""

import json

import pytest

from config import CONFIG
from core.rules import ConnectorRuleTable, RuleTableError, load_rule_table
from core.topics import TopicTable, TopicTableError, load_topic_table
from shared.models import ConnectorId


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


# --- Connector rules ---

def test_shipped_rules_file_matches_defaults():
    table = load_rule_table(CONFIG["paths"]["intent_rules_full_path"])
    default = ConnectorRuleTable.default()
    assert list(table.items()) == list(default.items())


def test_rules_loaded_from_file(tmp_path):
    path = write_json(tmp_path / "rules.json", {"github_repo": ["PR", "merge"]})
    table = load_rule_table(path)

    assert len(table) == 1
    assert ConnectorId.GITHUB_REPO in table
    assert table.triggers_for(ConnectorId.GITHUB_REPO) == ("pr", "merge")


def test_missing_rules_file_uses_defaults(tmp_path):
    table = load_rule_table(tmp_path / "does-not-exist.json")
    assert list(table.items()) == list(ConnectorRuleTable.default().items())


def test_empty_rules_file_gives_empty_table(tmp_path):
    path = write_json(tmp_path / "rules.json", {})
    assert len(load_rule_table(path)) == 0


def test_none_path_uses_defaults():
    assert len(load_rule_table(None)) == len(ConnectorRuleTable.default())


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps(["meeting"]),
        json.dumps({"jira_tickets": ["ticket"]}),
        json.dumps({"google_calendar": "meeting"}),
        json.dumps({"google_calendar": ["meeting", 7]}),
        json.dumps({"google_calendar": [""]}),
    ],
)
def test_malformed_rules_file_uses_defaults(tmp_path, content):
    path = tmp_path / "rules.json"
    path.write_text(content, encoding="utf-8")
    table = load_rule_table(path)
    assert list(table.items()) == list(ConnectorRuleTable.default().items())


def test_rule_table_rejects_unknown_key_type():
    with pytest.raises(RuleTableError):
        ConnectorRuleTable({"google_calendar": ("meeting",)})


def test_rule_table_is_read_only():
    table = ConnectorRuleTable.default()
    with pytest.raises(TypeError):
        table._rules[ConnectorId.GOOGLE_CALENDAR] = ("anything",)


# --- Topic table ---

def test_shipped_topic_file_matches_defaults():
    table = load_topic_table(CONFIG["paths"]["topic_sources_full_path"])
    assert table == TopicTable.default()


def test_topics_loaded_from_file(tmp_path):
    path = write_json(tmp_path / "topics.json", {
        "triggers": [{"phrase": "k8s", "topic": "Kubernetes"}],
        "sources": {"Kubernetes": ["Pods get evicted under memory pressure."]},
        "recency_cues": ["Latest"],
    })
    table = load_topic_table(path)

    assert table.triggers == (("k8s", "Kubernetes"),)
    assert table.excerpts_for("kubernetes") == ("Pods get evicted under memory pressure.",)
    assert table.excerpts_for("KUBERNETES") == ("Pods get evicted under memory pressure.",)
    assert table.recency_cues == ("latest",)


def test_recency_cues_default_when_omitted(tmp_path):
    path = write_json(tmp_path / "topics.json", {"triggers": [], "sources": {}})
    assert load_topic_table(path).recency_cues == ("right now",)


def test_missing_topic_file_uses_defaults(tmp_path):
    assert load_topic_table(tmp_path / "missing.json") == TopicTable.default()


@pytest.mark.parametrize(
    "content",
    [
        "",
        json.dumps([]),
        json.dumps({"triggers": {"deployment": "CD"}}),
        json.dumps({"triggers": [{"phrase": "deployment"}]}),
        json.dumps({"sources": {"cd": "one excerpt"}}),
        json.dumps({"recency_cues": "right now"}),
    ],
)
def test_malformed_topic_file_uses_defaults(tmp_path, content):
    path = tmp_path / "topics.json"
    path.write_text(content, encoding="utf-8")
    assert load_topic_table(path) == TopicTable.default()


def test_from_dict_raises_on_bad_shape():
    with pytest.raises(TopicTableError):
        TopicTable.from_dict({"triggers": [{"phrase": "", "topic": "Empty"}]})


def test_unknown_topic_has_no_excerpts():
    assert TopicTable.default().excerpts_for("Quantum Computing") == ()
