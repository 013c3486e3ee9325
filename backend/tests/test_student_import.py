from __future__ import annotations

from campus.services.store import Kind
from campus.services.student_import import import_students, normalize_row


def test_normalize_row_matches_headers_loosely():
    row = {" USN ": " 1ms21cs050 ", "Name": "Asha", "Extra": "ignored", "Semester": 3}
    assert normalize_row(row) == {"usn": "1ms21cs050", "name": "Asha", "semester": 3}


def test_bad_rows_are_skipped_and_the_rest_inserted(seeded_store):
    rows = [
        {"USN": "1MS21CS010", "Name": "Asha Rao", "Department": "Computer Science", "Semester": "5", "Section": "A"},
        {"USN": "1MS21CS001", "Name": "Duplicate", "Department": "Computer Science", "Semester": "5", "Section": "A"},
        {"USN": "1MS21CS011", "Name": "", "Department": "Computer Science", "Semester": "5", "Section": "A"},
        {"USN": "1MS21CS012", "Name": "Bala K", "Department": "Mechanical", "Semester": "3", "Section": "B"},
        {"USN": "1MS21CS010", "Name": "Repeat in file", "Department": "Computer Science", "Semester": "5", "Section": "A"},
    ]
    before = seeded_store.count(Kind.STUDENT)

    result = import_students(seeded_store, rows)

    assert result.inserted == 2
    assert result.skipped == 3
    assert [(e.row, e.code) for e in result.errors] == [
        (2, "STUDENT_ALREADY_EXISTS"),
        (3, "INVALID_STUDENT"),
        (5, "STUDENT_ALREADY_EXISTS"),
    ]
    assert seeded_store.count(Kind.STUDENT) == before + 2
    assert seeded_store.find(Kind.STUDENT, "1ms21cs012").semester == 3


def test_empty_import(store):
    result = import_students(store, [])
    assert (result.inserted, result.skipped, result.errors) == (0, 0, [])


def test_non_mapping_rows_are_reported_not_fatal(store):
    rows = [
        None,
        {"usn": "1MS21EC001", "name": "Meera", "department": "Electronics", "semester": 2, "section": "C"},
        ["1MS21EC002", "Arun"],
    ]

    result = import_students(store, rows)

    assert result.inserted == 1
    assert [(e.row, e.code) for e in result.errors] == [(1, "INVALID_ROW"), (3, "INVALID_ROW")]
    assert store.find(Kind.STUDENT, "1MS21EC001") is not None
