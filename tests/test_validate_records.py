import json

from scripts.validate_records import build_report, main, validate_record


CONTACT = {
    "name": "Mario Rossi",
    "email": "mario.rossi@example.com",
    "phone": "+39 340 123 4567",
    "subject": "Richiesta informazioni",
    "message": "Vorrei avere maggiori informazioni sui corsi di preparazione.",
}

QUESTION = {
    "text": "Qual è la capitale d'Italia?",
    "answers": [{"text": "Roma", "is_correct": True}, {"text": "Milano"}],
}


def test_contact_record_returns_sanitized_data():
    outcome = validate_record("contact", {**CONTACT, "subject": "<b>Richiesta</b> informazioni"})
    assert outcome["valid"] is True
    assert outcome["data"]["subject"] == "Richiesta informazioni"
    assert "materia" not in outcome["data"]


def test_contact_record_error_is_keyed_by_field():
    outcome = validate_record("contact", {**CONTACT, "email": "bad"})
    assert outcome == {"valid": False, "errors": {"email": "Formato email non valido"}}

    generic = validate_record("contact", {**CONTACT, "name": ""})
    assert generic["errors"] == {"form": "Tutti i campi sono obbligatori"}


def test_question_record_applies_answer_rules():
    assert validate_record("question", QUESTION)["valid"] is True

    two_correct = {**QUESTION, "answers": [{"text": "A", "is_correct": True}, {"text": "B", "is_correct": True}]}
    outcome = validate_record("question", two_correct)
    assert outcome["valid"] is False
    assert set(outcome["errors"]) == {"answers"}

    open_text = {"text": "Spiega", "type": "OPEN_TEXT", "open_validation_type": "KEYWORDS"}
    assert set(validate_record("question", open_text)["errors"]) == {"keywords"}


def test_unknown_kind_and_bad_data():
    assert validate_record("invoice", {})["errors"] == {"kind": "Unknown record kind: 'invoice'"}
    assert validate_record("contact", ["not", "a", "dict"])["errors"] == {"data": "Record data must be an object"}


def test_schema_kinds():
    assert validate_record("assignment", {"student_id": "s1"})["valid"] is True
    assert validate_record("assignment", {})["errors"] == {
        "__root__": "Devi selezionare almeno uno tra studente o gruppo"
    }
    assert validate_record("quick_quiz", {"subject_ids": ["bio"]})["valid"] is True
    assert validate_record("bulk_assignment", {"simulation_id": "s", "targets": []})["valid"] is False
    assert validate_record("notification", {"title": "Avviso", "message": "Lezione spostata"})["valid"] is True
    assert validate_record("notification", {"title": "", "message": "x"})["errors"] == {
        "title": "Il titolo è obbligatorio"
    }


def test_build_report_counts():
    records = [
        {"kind": "contact", "data": CONTACT},
        {"kind": "question", "data": QUESTION},
        {"kind": "profile", "data": {}},
        {"kind": "parent", "data": {"relationship": "PADRE"}},
        {"data": {}},
    ]
    report = build_report(records)
    assert report["total"] == 5
    assert report["valid"] == 2
    assert report["invalid"] == 3
    assert [r["index"] for r in report["records"]] == [0, 1, 2, 3, 4]
    assert report["records"][2]["kind"] == "profile"
    assert len(report["records"][2]["errors"]) == 7


def test_build_report_non_object_records_are_invalid():
    report = build_report([1, {"kind": "contact", "data": CONTACT}, "contact", None])
    assert report["total"] == 4
    assert report["valid"] == 1
    assert report["invalid"] == 3
    assert report["records"][0] == {
        "index": 0,
        "kind": "",
        "valid": False,
        "errors": {"record": "Record must be an object"},
    }
    assert [r["index"] for r in report["records"] if not r["valid"]] == [0, 2, 3]


def test_build_report_only_invalid():
    records = [{"kind": "contact", "data": CONTACT}, {"kind": "profile", "data": {}}]
    report = build_report(records, only_invalid=True)
    assert report["total"] == 2
    assert report["valid"] == 1
    assert [r["index"] for r in report["records"]] == [1]


def test_main_writes_report_and_exit_code(tmp_path):
    source = tmp_path / "records.json"
    source.write_text(
        json.dumps([{"kind": "contact", "data": CONTACT}, {"kind": "quick_quiz", "data": {"subject_ids": []}}]),
        encoding="utf-8",
    )
    output = tmp_path / "report.json"

    code = main([str(source), "--output", str(output), "--only-invalid"])

    assert code == 1
    report = json.loads(output.read_text(encoding="utf-8"))
    assert report["invalid"] == 1
    assert report["records"][0]["errors"] == {"subject_ids": "Seleziona almeno una materia"}


def test_main_all_valid_prints_to_stdout(tmp_path, capsys):
    source = tmp_path / "records.json"
    source.write_text(json.dumps([{"kind": "contact", "data": CONTACT}]), encoding="utf-8")

    assert main([str(source)]) == 0
    printed = json.loads(capsys.readouterr().out)
    assert printed["valid"] == 1


def test_main_reports_non_object_records(tmp_path):
    source = tmp_path / "records.json"
    source.write_text(json.dumps([1]), encoding="utf-8")
    output = tmp_path / "report.json"
    assert main([str(source), "--output", str(output)]) == 1
    report = json.loads(output.read_text(encoding="utf-8"))
    assert report["invalid"] == 1
    assert report["records"][0]["errors"] == {"record": "Record must be an object"}


def test_main_rejects_non_list_input(tmp_path):
    source = tmp_path / "records.json"
    source.write_text(json.dumps({"kind": "contact"}), encoding="utf-8")
    assert main([str(source)]) == 2
