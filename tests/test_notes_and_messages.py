from complaintdesk.core.events import ComplaintScope
from complaintdesk.services.base import ErrorCode
from complaintdesk.services.complaint import MessageService, NoteService


def test_notes_require_write_access(db, file_complaint, principals):
    complaint = file_complaint()
    service = NoteService(db)

    assert service.add_note(principals["student"], complaint.id, "hi").error_code == ErrorCode.UNAUTHORIZED
    assert service.add_note(principals["facilities_admin"], complaint.id, "hi").error_code == ErrorCode.UNAUTHORIZED

    result = service.add_note(principals["network_admin"], complaint.id, "  Checked the router  ")
    assert result.is_success
    assert result.data.note == "Checked the router"
    assert result.data.author_name == "Nora Network"


def test_empty_note_is_rejected(db, file_complaint, principals):
    complaint = file_complaint()
    result = NoteService(db).add_note(principals["admin"], complaint.id, "   ")
    assert result.error_code == ErrorCode.VALIDATION_ERROR


def test_only_the_author_deletes_a_note(db, file_complaint, principals):
    complaint = file_complaint()
    service = NoteService(db)
    note = service.add_note(principals["network_admin"], complaint.id, "mine").data

    assert service.delete_note(principals["super_admin"], note.id).error_code == ErrorCode.UNAUTHORIZED
    assert service.delete_note(principals["network_admin"], note.id).is_success
    assert service.list_notes(principals["admin"], complaint.id).data == []
    assert service.delete_note(principals["network_admin"], note.id).error_code == ErrorCode.NOT_FOUND


def test_owner_and_scoped_staff_exchange_messages(db, file_complaint, principals):
    complaint = file_complaint()
    service = MessageService(db)

    from_student = service.send(principals["student"], complaint.id, "Still broken")
    from_admin = service.send(principals["network_admin"], complaint.id, "On it")

    assert from_student.is_success and not from_student.data.is_admin
    assert from_admin.is_success and from_admin.data.is_admin

    thread = service.list_messages(principals["student"], complaint.id).data
    assert [m.message for m in thread] == ["Still broken", "On it"]
    assert service.message_count(principals["admin"], complaint.id).data == 2


def test_messages_are_denied_outside_read_scope(db, file_complaint, principals):
    complaint = file_complaint()
    service = MessageService(db)

    assert service.send(principals["other_student"], complaint.id, "hello").error_code == ErrorCode.UNAUTHORIZED
    assert service.send(principals["facilities_admin"], complaint.id, "hello").error_code == ErrorCode.UNAUTHORIZED
    assert service.list_messages(principals["other_student"], complaint.id).error_code == ErrorCode.UNAUTHORIZED


def test_blank_message_is_rejected(db, file_complaint, principals):
    complaint = file_complaint()
    result = MessageService(db).send(principals["student"], complaint.id, " \n ")
    assert result.error_code == ErrorCode.VALIDATION_ERROR
    assert result.error.field == "message"


def test_message_publishes_to_complaint_scope(db, notifier, file_complaint, principals):
    complaint = file_complaint()
    with notifier.subscribe(ComplaintScope(complaint.id)) as sub:
        MessageService(db, notifier).send(principals["student"], complaint.id, "ping")
        events = sub.drain()

    assert [e.event_type for e in events] == ["complaint_messages.insert"]
