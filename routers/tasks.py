from fastapi import APIRouter, Depends, Response, status
from typing import List

from dependencies import get_current_user_id, get_task_store
from schemas import Task, TaskCreate, TaskUpdate
from task_store import TaskStore

# Every handler scopes the store call to the id resolved by the auth gate,
# never to anything the client sends.
router = APIRouter(
    prefix="/todos",
    tags=["todos"]
)

@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskCreate, store: TaskStore = Depends(get_task_store), user_id: str = Depends(get_current_user_id)):
    """
    Creates a new todo owned by the authenticated user.

    HTML tags are stripped from the task name before it is stored.

    Args:
        task (TaskCreate): taskname, status ('pending' | 'done') and tag
            ('personal' | 'official' | 'family'). All three are required.
        store (TaskStore): task store bound to the request's DB session.
        user_id (str): id resolved from the token by the auth gate.

    Returns:
        Task: the stored todo including its assigned id.

    Raises:
        ValidationError (400): a field is missing or outside its allowed values.
    """
    db_task = store.create(user_id, task.taskname, task.status, task.tag)
    return Task.model_validate(db_task)

@router.get("", response_model=List[Task])
def read_tasks(store: TaskStore = Depends(get_task_store), user_id: str = Depends(get_current_user_id)):
    """Lists the caller's own todos; an empty list when there are none."""
    return [Task.model_validate(t) for t in store.list_by_owner(user_id)]

@router.get("/{task_id}", response_model=Task)
def read_task(task_id: str, store: TaskStore = Depends(get_task_store), user_id: str = Depends(get_current_user_id)):
    return Task.model_validate(store.get(user_id, task_id))

@router.api_route("/{task_id}", methods=["PATCH", "PUT"], response_model=Task)
def update_task(task_id: str, task: TaskUpdate, store: TaskStore = Depends(get_task_store), user_id: str = Depends(get_current_user_id)):
    """
    Partially updates a todo. PUT behaves exactly like PATCH.

    Only the fields present with a non-empty value change; the others keep
    their stored value. The owner can never be changed.

    Args:
        task_id (str): id of the todo to change.
        task (TaskUpdate): any subset of taskname, status and tag.

    Returns:
        Task: the todo after the update.

    Raises:
        ValidationError (400): no usable field supplied, or an invalid value.
        NotFoundError (404): no such todo, or it belongs to another user.
    """
    db_task = store.update(user_id, task_id, task.model_dump(exclude_unset=True))
    return Task.model_validate(db_task)

@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, store: TaskStore = Depends(get_task_store), user_id: str = Depends(get_current_user_id)):
    """
    Permanently deletes a todo of the caller.

    Raises:
        NotFoundError (404): no such todo, or it belongs to another user.
    """
    store.delete(user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
