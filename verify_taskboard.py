#!/usr/bin/env python3
"""
Quick verification that the task board works end-to-end.
"""
import tempfile
from pathlib import Path

from pkg.taskboard.board import TaskBoard
from pkg.taskboard.render import build_columns
from pkg.taskboard.schema import TaskStatus
from pkg.taskboard.store import DocumentStore


def show(board: TaskBoard) -> None:
    for column in build_columns(board.columns()):
        titles = ", ".join(row.title for row in column.rows) or "(empty)"
        print(f"   {column.title:<12} {titles}")


def main():
    print("=" * 60)
    print("Board Infinity Verification")
    print("=" * 60)

    db_path = str(Path(tempfile.mkdtemp()) / "taskboard.db")

    print("\n[1/5] Creating SQLite document store...")
    store = DocumentStore(db_path)
    print("✅ Store created")

    print("\n[2/5] Mounting board (live subscription)...")
    board = TaskBoard(store)
    board.mount()
    print(f"✅ Mounted, {len(board.tasks)} tasks")

    print("\n[3/5] Creating task via the Create Task form...")
    form = board.create_form()
    form.title = "Write spec"
    form.date = "2024-01-01"
    if not form.submit():
        print(f"❌ Form rejected: {form.missing_fields()}")
        return
    task = board.tasks[-1]
    print(f"✅ Task created: {task.id}")
    show(board)

    print("\n[4/5] Moving task to COMPLETED...")
    board.change_status(task.id, TaskStatus.COMPLETED)
    show(board)

    print("\n[5/5] Deleting task...")
    board.delete(task.id)
    show(board)
    board.unmount()

    print("\n" + "=" * 60)
    print("✅ ALL CHECKS PASSED")
    print("=" * 60)
    print(f"Test database: {db_path}")


if __name__ == "__main__":
    main()
