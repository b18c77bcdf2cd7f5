import time
from datetime import datetime


def test_notes_crud(client, auth_header):
    # Empty notes list
    r = client.get("/api/notes", headers=auth_header)
    assert r.status_code == 200
    assert r.json() == {"notes": []}

    # Create a note (valid)
    note_data = {"title": "First", "content": "Hello note"}
    r2 = client.post("/api/notes", json=note_data, headers=auth_header)
    assert r2.status_code == 201
    note = r2.json()["note"]
    assert note["title"] == "First"
    assert note["content"] == "Hello note"
    note_id = note["id"]

    # List notes: exactly the new one, untouched since creation
    notes = client.get("/api/notes", headers=auth_header).json()["notes"]
    assert len(notes) == 1
    assert notes[0]["title"] == "First"
    assert notes[0]["content"] == "Hello note"
    assert notes[0]["created_at"] == notes[0]["updated_at"]

    # Get note by ID (success)
    r3 = client.get(f"/api/notes/{note_id}", headers=auth_header)
    assert r3.status_code == 200
    assert r3.json()["note"]["id"] == note_id

    # Update note
    update = {"content": "Updated!", "title": "Renamed"}
    r4 = client.put(f"/api/notes/{note_id}", json=update, headers=auth_header)
    assert r4.status_code == 200
    assert r4.json()["note"]["content"] == "Updated!"
    assert r4.json()["note"]["title"] == "Renamed"

    # Delete note
    r5 = client.delete(f"/api/notes/{note_id}", headers=auth_header)
    assert r5.status_code == 200
    assert r5.json() == {"ok": True}

    # Ensure note gone
    r6 = client.get(f"/api/notes/{note_id}", headers=auth_header)
    assert r6.status_code == 404
    assert r6.json() == {"error": "Note not found"}

def test_partial_update_keeps_title_and_advances_updated_at(client, auth_header):
    note = client.post("/api/notes", json={"title": "Keep me", "content": "old"}, headers=auth_header).json()["note"]
    time.sleep(0.01)

    r = client.put(f"/api/notes/{note['id']}", json={"content": "x"}, headers=auth_header)
    assert r.status_code == 200
    updated = r.json()["note"]
    assert updated["title"] == "Keep me"
    assert updated["content"] == "x"
    assert updated["created_at"] == note["created_at"]
    assert datetime.fromisoformat(updated["updated_at"]) > datetime.fromisoformat(note["updated_at"])

def test_null_fields_leave_note_unchanged(client, auth_header):
    note = client.post("/api/notes", json={"title": "T", "content": "C"}, headers=auth_header).json()["note"]
    r = client.put(f"/api/notes/{note['id']}", json={"title": None}, headers=auth_header)
    assert r.status_code == 200
    assert r.json()["note"]["title"] == "T"
    assert r.json()["note"]["content"] == "C"

def test_update_rejects_empty_title(client, auth_header):
    note = client.post("/api/notes", json={"title": "T", "content": "C"}, headers=auth_header).json()["note"]
    r = client.put(f"/api/notes/{note['id']}", json={"title": "  "}, headers=auth_header)
    assert r.status_code == 400
    assert client.get(f"/api/notes/{note['id']}", headers=auth_header).json()["note"]["title"] == "T"

def test_updated_at_is_not_client_settable(client, auth_header):
    note = client.post(
        "/api/notes",
        json={"title": "T", "content": "C", "updated_at": "1999-01-01T00:00:00"},
        headers=auth_header,
    ).json()["note"]
    assert not note["updated_at"].startswith("1999")

def test_notes_ordered_by_updated_at_desc(client, auth_header):
    ids = []
    for title in ("one", "two", "three"):
        ids.append(client.post("/api/notes", json={"title": title, "content": "c"}, headers=auth_header).json()["note"]["id"])
    client.put(f"/api/notes/{ids[0]}", json={"content": "touched"}, headers=auth_header)

    titles = [n["title"] for n in client.get("/api/notes", headers=auth_header).json()["notes"]]
    assert titles == ["one", "three", "two"]

def test_notes_auth_required(client):
    # All notes endpoints must require auth
    r = client.get("/api/notes")
    assert r.status_code == 401
    r2 = client.post("/api/notes", json={"title": "x", "content": "y"})
    assert r2.status_code == 401
    r3 = client.get("/api/notes/123")
    assert r3.status_code == 401
    r4 = client.put("/api/notes/123", json={"title": "x"})
    assert r4.status_code == 401
    r5 = client.delete("/api/notes/123")
    assert r5.status_code == 401

def test_notes_multi_user(client, auth_header, second_auth_header):
    # User 1 adds note
    note_data = {"title": "U1 note", "content": "Owned"}
    r = client.post("/api/notes", json=note_data, headers=auth_header)
    note_id = r.json()["note"]["id"]

    # User 2 cannot see, change or delete it
    notes2 = client.get("/api/notes", headers=second_auth_header).json()["notes"]
    assert all(n["id"] != note_id for n in notes2)

    r2 = client.get(f"/api/notes/{note_id}", headers=second_auth_header)
    assert r2.status_code == 404

    r3 = client.put(f"/api/notes/{note_id}", json={"title": "hax"}, headers=second_auth_header)
    assert r3.status_code == 404

    r4 = client.delete(f"/api/notes/{note_id}", headers=second_auth_header)
    assert r4.status_code == 404

    # Same answer as for a note that never existed
    r5 = client.put("/api/notes/999", json={"title": "hax"}, headers=second_auth_header)
    assert r3.json() == r5.json()

    # Owner still sees it unchanged
    mine = client.get(f"/api/notes/{note_id}", headers=auth_header).json()["note"]
    assert mine["title"] == "U1 note"

def test_notes_search(client, auth_header):
    # Insert several notes
    for i in range(3):
        client.post("/api/notes", json={"title": f"todo-{i}", "content": "mytask"}, headers=auth_header)
    client.post("/api/notes", json={"title": "Meeting", "content": "work"}, headers=auth_header)
    # Search by title
    r = client.get("/api/notes?q=todo", headers=auth_header)
    assert r.status_code == 200
    found = [note["title"] for note in r.json()["notes"]]
    assert len(found) == 3
    assert all("todo" in t for t in found)
    # Search by content
    r2 = client.get("/api/notes?q=WORK", headers=auth_header)
    assert len(r2.json()["notes"]) == 1
    assert r2.json()["notes"][0]["title"] == "Meeting"

def test_create_note_invalid(client, auth_header):
    # Missing title
    r = client.post("/api/notes", json={"content": "x"}, headers=auth_header)
    assert r.status_code == 400
    assert r.json() == {"error": "title and content are required"}
    # Missing content
    r2 = client.post("/api/notes", json={"title": "x"}, headers=auth_header)
    assert r2.status_code == 400
    # Whitespace only
    r3 = client.post("/api/notes", json={"title": "   ", "content": "x"}, headers=auth_header)
    assert r3.status_code == 400
    # Title too long
    r4 = client.post("/api/notes", json={"title": "x" * 300, "content": "x"}, headers=auth_header)
    assert r4.status_code == 400

def test_markup_is_stored_verbatim(client, auth_header):
    # escaping happens in the browser; the API must not alter the text
    client.post("/api/notes", json={"title": "<img src=x>", "content": "a & b"}, headers=auth_header)
    note = client.get("/api/notes", headers=auth_header).json()["notes"][0]
    assert note["title"] == "<img src=x>"
    assert note["content"] == "a & b"

def test_update_note_not_found(client, auth_header):
    r = client.put("/api/notes/999", json={"title": "nope"}, headers=auth_header)
    assert r.status_code == 404

def test_delete_note_not_found(client, auth_header):
    r = client.delete("/api/notes/999", headers=auth_header)
    assert r.status_code == 404

def test_oversized_note_id_is_not_found(client, auth_header):
    url = "/api/notes/99999999999999999999"
    assert client.get(url, headers=auth_header).json() == {"error": "Note not found"}
    assert client.put(url, json={"title": "x"}, headers=auth_header).status_code == 404
    assert client.delete(url, headers=auth_header).status_code == 404
    assert client.get(url, headers=auth_header).status_code == 404
