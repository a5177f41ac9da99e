"""
Complaint service: lifecycle, assignment and listing of complaints.

Every mutation follows the same sequence: load the row, check the access
policy against that fresh read, validate the change, write the row and
its ledger entries in one transaction, commit, then publish change events.
Concurrent writers are not serialized; the last committed write wins.
"""

from datetime import datetime
from pathlib import PurePosixPath
from typing import List, Optional
from urllib.parse import urlparse

from sqlalchemy.orm import Session

from complaintdesk.config.settings import settings
from complaintdesk.core.constants import (
    ASSIGNMENT_NOTE_TEMPLATE,
    ATTACHMENT_EXTENSIONS,
    DEADLINE_FORMAT,
    DEADLINE_NOTE_TEMPLATE,
)
from complaintdesk.core.events import ChangeEvent, ChangeNotifier
from complaintdesk.core.exceptions import (
    AuthorizationError,
    ComplaintNotFoundError,
    DuplicateEntryError,
    ValidationError,
)
from complaintdesk.core.utils import ensure_utc, utcnow
from complaintdesk.models.base.enums import (
    GLOBAL_ADMIN_ROLES,
    ChangeType,
    ComplaintStatus,
    Priority,
    UserRole,
)
from complaintdesk.models.complaint import Complaint, ComplaintHistory, ComplaintNote
from complaintdesk.repositories.category import (
    AdminCategoryAssignmentRepository,
    CategoryRepository,
)
from complaintdesk.repositories.complaint import (
    ComplaintHistoryRepository,
    ComplaintNoteRepository,
    ComplaintRepository,
)
from complaintdesk.repositories.user import UserRepository, UserRoleRepository
from complaintdesk.schemas.common.pagination import PaginatedResponse
from complaintdesk.schemas.complaint import (
    AssignableAdmin,
    ComplaintCreate,
    ComplaintDetail,
    ComplaintFilterParams,
)
from complaintdesk.services.base import BaseService, ServiceResult
from complaintdesk.services.common.permissions import (
    Principal,
    PrincipalResolver,
    can_manage_category,
    require_read,
    require_write,
)
from complaintdesk.services.complaint.complaint_workflow import (
    assignment_moves_status,
    validate_transition,
)


class ComplaintService(BaseService[Complaint, ComplaintRepository]):
    """
    Owns complaint rows and their status state machine.
    """

    def __init__(
        self,
        db_session: Session,
        notifier: Optional[ChangeNotifier] = None,
        resolver: Optional[PrincipalResolver] = None,
    ):
        super().__init__(ComplaintRepository(db_session), db_session, notifier)
        self.history = ComplaintHistoryRepository(db_session)
        self.notes = ComplaintNoteRepository(db_session)
        self.categories = CategoryRepository(db_session)
        self.assignments = AdminCategoryAssignmentRepository(db_session)
        self.users = UserRepository(db_session)
        self.roles = UserRoleRepository(db_session)
        self.resolver = resolver or PrincipalResolver(db_session)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _load(self, complaint_id: str) -> Complaint:
        complaint = self.repository.find_by_id(complaint_id)
        if complaint is None:
            raise ComplaintNotFoundError(complaint_id)
        return complaint

    def _record(
        self,
        complaint: Complaint,
        change_type: ChangeType,
        old_value: Optional[str],
        new_value: Optional[str],
        principal: Principal,
        at: datetime,
    ) -> ComplaintHistory:
        return self.history.create(
            ComplaintHistory(
                complaint_id=complaint.id,
                change_type=change_type,
                old_value=old_value,
                new_value=new_value,
                changed_by=principal.user_id,
                created_at=at,
            )
        )

    def _validate_attachments(self, attachments: List[str]) -> None:
        if len(attachments) > settings.MAX_ATTACHMENTS:
            raise ValidationError(
                f"At most {settings.MAX_ATTACHMENTS} attachments are allowed",
                field="attachments",
            )
        for url in attachments:
            suffix = PurePosixPath(urlparse(url).path).suffix.lower()
            mime_type = ATTACHMENT_EXTENSIONS.get(suffix)
            if mime_type is None or mime_type not in settings.ALLOWED_ATTACHMENT_TYPES:
                raise ValidationError(
                    f"Attachment type not allowed: {url}",
                    field="attachments",
                )

    def _validate_create(self, data: ComplaintCreate) -> None:
        if not data.title:
            raise ValidationError("Title is required", field="title")
        if not data.description:
            raise ValidationError("Description is required", field="description")
        self._validate_attachments(data.attachments)
        if data.category_id and self.categories.find_by_id(data.category_id) is None:
            raise ValidationError("Category does not exist", field="category_id")

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create(self, principal: Principal, data: ComplaintCreate) -> ServiceResult[ComplaintDetail]:
        """
        File a complaint owned by ``principal``.

        The complaint and its ``created`` history entry are written in one
        transaction and share one timestamp. A repeated create carrying the
        same idempotency key returns the first complaint unchanged.
        """
        try:
            if data.idempotency_key:
                existing = self.repository.find_by_idempotency_key(principal.user_id, data.idempotency_key)
                if existing is not None:
                    return ServiceResult.success(
                        ComplaintDetail.from_model(existing),
                        message="Complaint already created",
                        metadata={"replayed": True},
                    )

            self._validate_create(data)

            now = utcnow()
            complaint = Complaint(
                user_id=principal.user_id,
                title=data.title,
                description=data.description,
                priority=data.priority,
                status=ComplaintStatus.PENDING,
                category_id=data.category_id,
                attachments=list(data.attachments),
                idempotency_key=data.idempotency_key,
                created_at=now,
                updated_at=now,
            )

            try:
                with self.transaction():
                    self.repository.create(complaint)
                    self._record(
                        complaint, ChangeType.CREATED, None, ComplaintStatus.PENDING.value, principal, now
                    )
            except DuplicateEntryError:
                # Lost a race against a concurrent create with the same key
                if not data.idempotency_key:
                    raise
                existing = self.repository.find_by_idempotency_key(principal.user_id, data.idempotency_key)
                if existing is None:
                    raise
                return ServiceResult.success(
                    ComplaintDetail.from_model(existing),
                    message="Complaint already created",
                    metadata={"replayed": True},
                )

            self._log_operation("Complaint created", complaint.id, {"user_id": principal.user_id})
            self._publish([
                ChangeEvent.for_complaint("complaints", "insert", complaint),
                ChangeEvent.for_complaint("complaint_history", "insert", complaint),
            ])
            return ServiceResult.success(ComplaintDetail.from_model(complaint), message="Complaint created")
        except Exception as e:
            return self._handle_exception(e, "create complaint")

    # -------------------------------------------------------------------------
    # Field transitions
    # -------------------------------------------------------------------------

    def set_status(
        self,
        principal: Principal,
        complaint_id: str,
        status: ComplaintStatus,
    ) -> ServiceResult[ComplaintDetail]:
        """
        Move a complaint to ``status``.

        Re-sending the current status is a no-op and writes no history.
        """
        try:
            complaint = self._load(complaint_id)
            require_write(principal, complaint)

            if complaint.status == status:
                return ServiceResult.success(ComplaintDetail.from_model(complaint), message="Status unchanged")

            validate_transition(complaint.status, status)

            old_status = complaint.status
            now = utcnow()
            with self.transaction():
                self.repository.update(complaint, {"status": status, "updated_at": now})
                self._record(complaint, ChangeType.STATUS_CHANGE, old_status.value, status.value, principal, now)

            self._log_operation(
                "Complaint status changed",
                complaint.id,
                {"old_status": old_status.value, "new_status": status.value},
            )
            self._publish([
                ChangeEvent.for_complaint("complaints", "update", complaint),
                ChangeEvent.for_complaint("complaint_history", "insert", complaint),
            ])
            return ServiceResult.success(ComplaintDetail.from_model(complaint), message="Status updated")
        except Exception as e:
            return self._handle_exception(e, "update complaint status", complaint_id)

    def set_priority(
        self,
        principal: Principal,
        complaint_id: str,
        priority: Priority,
    ) -> ServiceResult[ComplaintDetail]:
        """Change the priority; same-value requests are no-ops."""
        try:
            complaint = self._load(complaint_id)
            require_write(principal, complaint)

            if complaint.priority == priority:
                return ServiceResult.success(ComplaintDetail.from_model(complaint), message="Priority unchanged")

            old_priority = complaint.priority
            now = utcnow()
            with self.transaction():
                self.repository.update(complaint, {"priority": priority, "updated_at": now})
                self._record(
                    complaint, ChangeType.PRIORITY_CHANGE, old_priority.value, priority.value, principal, now
                )

            self._log_operation(
                "Complaint priority changed",
                complaint.id,
                {"old_priority": old_priority.value, "new_priority": priority.value},
            )
            self._publish([
                ChangeEvent.for_complaint("complaints", "update", complaint),
                ChangeEvent.for_complaint("complaint_history", "insert", complaint),
            ])
            return ServiceResult.success(ComplaintDetail.from_model(complaint), message="Priority updated")
        except Exception as e:
            return self._handle_exception(e, "update complaint priority", complaint_id)

    # -------------------------------------------------------------------------
    # Assignment and deadline
    # -------------------------------------------------------------------------

    def assign(
        self,
        principal: Principal,
        complaint_id: str,
        admin_id: str,
        note: Optional[str] = None,
    ) -> ServiceResult[ComplaintDetail]:
        """
        Assign a complaint to a staff member with scope over its category.

        Status moves to ``assigned`` only while the complaint has not yet
        reached that stage; otherwise only ``assigned_to`` changes.
        """
        try:
            complaint = self._load(complaint_id)
            require_write(principal, complaint)

            target = self.resolver.resolve(admin_id)
            if target is None or not can_manage_category(target, complaint.category_id):
                raise ValidationError(
                    "Selected admin has no scope over this complaint's category",
                    field="admin_id",
                )

            note_text = (note or "").strip()
            old_status = complaint.status
            moves_status = assignment_moves_status(old_status)
            now = utcnow()

            changes = {"assigned_to": admin_id, "updated_at": now}
            if moves_status:
                changes["status"] = ComplaintStatus.ASSIGNED

            with self.transaction():
                self.repository.update(complaint, changes)
                if moves_status:
                    self._record(
                        complaint,
                        ChangeType.STATUS_CHANGE,
                        old_status.value,
                        ComplaintStatus.ASSIGNED.value,
                        principal,
                        now,
                    )
                if note_text:
                    self.notes.create(
                        ComplaintNote(
                            complaint_id=complaint.id,
                            admin_id=principal.user_id,
                            note=ASSIGNMENT_NOTE_TEMPLATE.format(note=note_text),
                            created_at=now,
                            updated_at=now,
                        )
                    )
            # assigned_to changed underneath an already loaded relationship
            self.db.expire(complaint, ["assignee"])

            self._log_operation("Complaint assigned", complaint.id, {"assigned_to": admin_id})

            events = [ChangeEvent.for_complaint("complaints", "update", complaint)]
            if moves_status:
                events.append(ChangeEvent.for_complaint("complaint_history", "insert", complaint))
            if note_text:
                events.append(ChangeEvent.for_complaint("complaint_notes", "insert", complaint))
            self._publish(events)

            return ServiceResult.success(ComplaintDetail.from_model(complaint), message="Complaint assigned")
        except Exception as e:
            return self._handle_exception(e, "assign complaint", complaint_id)

    def set_deadline(
        self,
        principal: Principal,
        complaint_id: str,
        deadline: datetime,
        note: Optional[str] = None,
    ) -> ServiceResult[ComplaintDetail]:
        """
        Set a resolution deadline.

        Deadline changes are recorded as a staff note, not as a history entry.
        """
        try:
            complaint = self._load(complaint_id)
            if not principal.is_staff:
                raise AuthorizationError("Only staff can set deadlines", action="set_deadline", user_id=principal.user_id)
            require_write(principal, complaint)

            deadline = ensure_utc(deadline)
            now = utcnow()
            if deadline <= now:
                raise ValidationError("Deadline must be in the future", field="deadline")

            note_text = (note or "").strip() or None
            audit = DEADLINE_NOTE_TEMPLATE.format(deadline=deadline.strftime(DEADLINE_FORMAT))
            if note_text:
                audit = f"{audit}: {note_text}"

            with self.transaction():
                self.repository.update(
                    complaint,
                    {"deadline": deadline, "deadline_note": note_text, "updated_at": now},
                )
                self.notes.create(
                    ComplaintNote(
                        complaint_id=complaint.id,
                        admin_id=principal.user_id,
                        note=audit,
                        created_at=now,
                        updated_at=now,
                    )
                )

            self._log_operation("Complaint deadline set", complaint.id, {"deadline": deadline.isoformat()})
            self._publish([
                ChangeEvent.for_complaint("complaints", "update", complaint),
                ChangeEvent.for_complaint("complaint_notes", "insert", complaint),
            ])
            return ServiceResult.success(ComplaintDetail.from_model(complaint), message="Deadline set")
        except Exception as e:
            return self._handle_exception(e, "set complaint deadline", complaint_id)

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def delete(self, principal: Principal, complaint_id: str) -> ServiceResult[bool]:
        """Delete a complaint together with its history, notes and messages."""
        try:
            complaint = self._load(complaint_id)
            if not principal.is_staff:
                raise AuthorizationError("Only staff can delete complaints", action="delete", user_id=principal.user_id)
            require_write(principal, complaint)

            event = ChangeEvent.for_complaint("complaints", "delete", complaint)
            with self.transaction():
                self.repository.delete(complaint)

            self._log_operation("Complaint deleted", complaint_id)
            self._publish([event])
            return ServiceResult.success(True, message="Complaint deleted")
        except Exception as e:
            return self._handle_exception(e, "delete complaint", complaint_id)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, principal: Principal, complaint_id: str) -> ServiceResult[ComplaintDetail]:
        try:
            complaint = self._load(complaint_id)
            require_read(principal, complaint)
            return ServiceResult.success(ComplaintDetail.from_model(complaint))
        except Exception as e:
            return self._handle_exception(e, "get complaint", complaint_id)

    def list_for_principal(
        self,
        principal: Principal,
        filters: Optional[ComplaintFilterParams] = None,
    ) -> ServiceResult[PaginatedResponse[ComplaintDetail]]:
        """
        List complaints visible to ``principal``, newest first.

        Students see their own complaints; staff see every complaint in
        their category scope.
        """
        try:
            filters = filters or ComplaintFilterParams()
            if principal.is_staff:
                owner_id, category_ids = None, principal.visible_category_ids()
            else:
                owner_id, category_ids = principal.user_id, None

            complaints, total = self.repository.search_complaints(
                owner_id=owner_id,
                category_ids=category_ids,
                search_term=filters.search,
                category_id=filters.category_id,
                priority=filters.priority,
                status=filters.status,
                skip=filters.offset,
                limit=filters.page_size,
            )
            page = PaginatedResponse[ComplaintDetail](
                items=[ComplaintDetail.from_model(c) for c in complaints],
                total_items=total,
                page=filters.page,
                page_size=filters.page_size,
            )
            return ServiceResult.success(page)
        except Exception as e:
            return self._handle_exception(e, "list complaints")

    def list_assignable_admins(
        self,
        principal: Principal,
        complaint_id: str,
    ) -> ServiceResult[List[AssignableAdmin]]:
        """Staff eligible to take this complaint: global admins plus scoped category admins."""
        try:
            complaint = self._load(complaint_id)
            require_write(principal, complaint)

            roles = {row.user_id: row.role for row in self.roles.find_by_roles(GLOBAL_ADMIN_ROLES)}
            if complaint.category_id is not None:
                for admin_id in self.assignments.admin_ids_for_category(complaint.category_id):
                    if self.roles.get_role(admin_id) == UserRole.CATEGORY_ADMIN:
                        roles[admin_id] = UserRole.CATEGORY_ADMIN

            admins = [
                AssignableAdmin(id=user.id, name=user.name, email=user.email, role=roles[user.id])
                for user in self.users.find_by_ids(roles.keys())
            ]
            admins.sort(key=lambda admin: (admin.name.lower(), admin.id))
            return ServiceResult.success(admins)
        except Exception as e:
            return self._handle_exception(e, "list assignable admins", complaint_id)
