import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from errors import InternalError, NotFoundError, ValidationError
from task_models import TaskDB, TaskStatus, TaskTag

logger = logging.getLogger(__name__)

TASK_FIELDS = ("taskname", "status", "tag")
STATUSES = {s.value for s in TaskStatus}
TAGS = {t.value for t in TaskTag}


def validate_task_fields(fields: Dict[str, Optional[str]]) -> None:
    """Check the values that are present; callers decide which are required."""
    if "taskname" in fields:
        name = fields["taskname"]
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("taskname must be a non-empty string")
    if "status" in fields and fields["status"] not in STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(sorted(STATUSES))}")
    if "tag" in fields and fields["tag"] not in TAGS:
        raise ValidationError(f"tag must be one of: {', '.join(sorted(TAGS))}")


class TaskStore:
    """
    CRUD on the ``tasks`` table. Every lookup filters by task id AND owner id,
    so a task owned by someone else is indistinguishable from a missing one.
    """

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, what: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to %s task", what)
            raise InternalError() from exc

    def create(self, owner_id: str, taskname: Optional[str], status: Optional[str], tag: Optional[str]) -> TaskDB:
        if not taskname or not status or not tag:
            raise ValidationError("All fields are required")
        validate_task_fields({"taskname": taskname, "status": status, "tag": tag})

        task = TaskDB(taskname=taskname, status=status, tag=tag, owner_id=owner_id)
        self.db.add(task)
        self._commit("create")
        self.db.refresh(task)
        logger.info("User %s created task %s", owner_id, task.id)
        return task

    def list_by_owner(self, owner_id: str) -> List[TaskDB]:
        try:
            # Store-native order: insertion order on SQLite
            return self.db.query(TaskDB).filter(TaskDB.owner_id == owner_id).all()
        except SQLAlchemyError as exc:
            logger.exception("Failed to list tasks")
            raise InternalError() from exc

    def get(self, owner_id: str, task_id: str) -> TaskDB:
        try:
            task = (
                self.db.query(TaskDB)
                .filter(TaskDB.id == task_id, TaskDB.owner_id == owner_id)
                .first()
            )
        except SQLAlchemyError as exc:
            logger.exception("Failed to load task")
            raise InternalError() from exc
        if task is None:
            raise NotFoundError()
        return task

    def update(self, owner_id: str, task_id: str, fields: Dict[str, Optional[str]]) -> TaskDB:
        """
        Apply a partial update. Fields that are absent, None or empty keep their value.

        Raises:
            ValidationError: nothing to update, or an invalid value.
            NotFoundError: no task with this id owned by ``owner_id``.
        """
        changes = {k: v for k, v in fields.items() if k in TASK_FIELDS and v}
        if not changes:
            raise ValidationError("At least one field is required for the update")
        validate_task_fields(changes)

        task = self.get(owner_id, task_id)
        for key, value in changes.items():
            setattr(task, key, value)
        self._commit("update")
        self.db.refresh(task)
        logger.info("User %s updated task %s (%s)", owner_id, task_id, ", ".join(sorted(changes)))
        return task

    def delete(self, owner_id: str, task_id: str) -> None:
        task = self.get(owner_id, task_id)
        self.db.delete(task)
        self._commit("delete")
        logger.info("User %s deleted task %s", owner_id, task_id)
