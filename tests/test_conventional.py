import pytest

from copilot_commit.conventional import (
    COMMIT_TYPES,
    DEFAULT_TYPE,
    TYPE_RULES,
    ChangedFile,
    clean_suggestion,
    determine_commit_type,
    enforce_conventional_commit,
    extract_changed_files,
    extract_description,
    fallback_message,
    is_conventional,
    parse_diff_summary,
)


# ---------------------------------------------------------------------------
# Diff summary parsing and the fallback message
# ---------------------------------------------------------------------------

def test_extract_changed_files():
    assert extract_changed_files("M\tfile1.go\nA\tfile2.go\n") == ["file1.go", "file2.go"]


def test_extract_changed_files_skips_malformed_lines():
    changes = "M\tkept.py\nnot-a-record\n\nD\talso_kept.py"
    assert extract_changed_files(changes) == ["kept.py", "also_kept.py"]


def test_extract_changed_files_rename_uses_second_field():
    assert extract_changed_files("R100\told.py\tnew.py\n") == ["old.py"]


def test_parse_diff_summary_keeps_status():
    assert parse_diff_summary("M\ta.py\nD\tb.py\n") == [
        ChangedFile(status="M", path="a.py"),
        ChangedFile(status="D", path="b.py"),
    ]


@pytest.mark.parametrize("status, label", [
    ("A", "Added"),
    ("M", "Modified"),
    ("D", "Deleted"),
    ("R100", "Renamed"),
    ("X", "X"),
])
def test_changed_file_label(status, label):
    assert ChangedFile(status=status, path="a.py").label == label


def test_fallback_message():
    assert fallback_message("M\tfile1.go\nA\tfile2.go\n") == "chore: changes to file1.go, file2.go"


def test_fallback_message_caps_at_five_files():
    changes = "".join(f"M\tfile{i}.py\n" for i in range(8))
    message = fallback_message(changes)
    assert message == "chore: changes to file0.py, file1.py, file2.py, file3.py, file4.py"


def test_fallback_message_custom_limit():
    changes = "M\ta\nM\tb\nM\tc\n"
    assert fallback_message(changes, limit=2) == "chore: changes to a, b"


def test_fallback_message_empty_input():
    assert extract_changed_files("") == []
    assert fallback_message("") == "chore: changes to "


# ---------------------------------------------------------------------------
# Commit type classification
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("changes, expected", [
    ("M\ttests/test_core.py", "test"),
    ("M\tpkg/server_test.go", "test"),
    ("M\tbugfix.py", "fix"),
    ("M\tknown_bug.txt", "fix"),
    ("A\tfeature_flags.py", "feat"),
    ("A\taddress.py", "feat"),
    ("A\tnews.md", "feat"),
    ("M\tdocs/guide.rst", "docs"),
    ("M\tREADME.md", "docs"),
    ("M\trefactoring_notes.txt", "refactor"),
    ("M\tstyles.css", "style"),
    ("M\tformatter.py", "style"),
    ("M\tmain.go", "chore"),
])
def test_determine_commit_type(changes, expected):
    assert determine_commit_type(changes) == expected


def test_determine_commit_type_fix_beats_feat():
    assert determine_commit_type("M\tfix_feature.py\nA\tfeat.py") == "fix"


def test_determine_commit_type_test_beats_everything():
    assert determine_commit_type("M\tfix.py\nA\ttest_new.py\nM\tREADME") == "test"


def test_determine_commit_type_empty_is_default():
    assert determine_commit_type("") == DEFAULT_TYPE == "chore"


def test_determine_commit_type_is_case_insensitive():
    assert determine_commit_type("M\tBUGS.TXT") == "fix"


def test_determine_commit_type_custom_rules():
    rules = [(lambda text: "ci" in text, "ci")] + list(TYPE_RULES)
    assert determine_commit_type("M\t.circleci/config.yml", rules) == "ci"


def test_type_rules_only_produce_known_types():
    assert all(commit_type in COMMIT_TYPES for _, commit_type in TYPE_RULES)


# ---------------------------------------------------------------------------
# Description extraction and normalization
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("message, expected", [
    ("Added X.Y", "added X"),
    ("Update README", "update README"),
    ("  Trim me  ", "trim me"),
    (".hidden file support", ".hidden file support"),
    ("First sentence. Second sentence.", "first sentence"),
    ("", ""),
])
def test_extract_description(message, expected):
    assert extract_description(message) == expected


@pytest.mark.parametrize("message", [
    "feat: add login",
    "fix(api): handle empty body",
    "chore(deps-2): bump versions",
    "revert: undo the last change",
])
def test_enforce_conventional_commit_passthrough(message):
    assert enforce_conventional_commit(message, "M\ttests/test_x.py") == message


def test_enforce_conventional_commit_is_idempotent():
    once = enforce_conventional_commit("Fixed the parser. More text", "M\tparser.py")
    assert enforce_conventional_commit(once, "M\tparser.py") == once


@pytest.mark.parametrize("message", [
    "Added X.Y",
    "update the thing",
    "Feat: wrong case type",
    "feat(API): uppercase scope",
    "feature: unknown type",
    "fix:missing space",
])
def test_enforce_conventional_commit_output_matches_grammar(message):
    result = enforce_conventional_commit(message, "M\tmain.go")
    assert is_conventional(result)


def test_enforce_conventional_commit_rewrites_with_classified_type():
    assert enforce_conventional_commit("Added X.Y", "A\tnew_module.py") == "feat: added X"


def test_enforce_conventional_commit_never_adds_scope():
    result = enforce_conventional_commit("Handle login", "M\tsrc/auth/bugfix.py")
    assert result == "fix: handle login"


def test_enforce_conventional_commit_empty_description():
    assert enforce_conventional_commit("   ", "") == "chore: "


# ---------------------------------------------------------------------------
# Suggestion cleanup
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("text, expected", [
    ("feat: add login\n\n- detail", "feat: add login"),
    ("\n\n  `fix: typo`  \n", "fix: typo"),
    ('"docs: update readme"', "docs: update readme"),
    ('fix: handle "quoted"', 'fix: handle "quoted"'),
    ("feat: support `--dry-run`", "feat: support `--dry-run`"),
    ("'chore: it's done'", "chore: it's done"),
    ('"`docs: nested`"', "docs: nested"),
    ("", ""),
])
def test_clean_suggestion(text, expected):
    assert clean_suggestion(text) == expected
