"""Daily planning suggestions."""

from dataclasses import dataclass
from datetime import date

from taskdeck.models.workspace import Workspace

MAX_SUGGESTIONS = 6
MIN_SCORE = 10


@dataclass
class TaskSuggestion:
    project_id: str
    task_id: str
    project_name: str
    task_description: str
    reason: str
    score: int
    priority: str | None = None
    due_date: date | None = None
    estimated_time: float = 0.0


class TaskSuggestionEngine:
    """Score open tasks to propose a plan for the day."""

    def __init__(self, workspace: Workspace, limit: int = MAX_SUGGESTIONS):
        self.workspace = workspace
        self.limit = limit

    def suggest(self, today: str) -> list[TaskSuggestion]:
        """Top-scoring open tasks, best first.

        Args:
            today: ISO date the plan is for; due dates are compared to it.
        """
        today_date = date.fromisoformat(today)
        suggestions: list[TaskSuggestion] = []

        for project in self.workspace.projects.values():
            for task in project.tasks:
                if task.completed:
                    continue

                score = 0
                reason = ""

                if project.priority == "high":
                    score += 30
                    reason = "🔥 High priority project"
                elif project.priority == "medium":
                    score += 15

                if task.due_date:
                    if task.due_date < today_date:
                        score += 50
                        reason = "⚠️ Overdue task"
                    elif task.due_date == today_date:
                        score += 40
                        reason = "📅 Due today"

                if project.status == "execution":
                    score += 20
                    if not reason:
                        reason = "🚀 Active project"

                if task.estimated_time and task.estimated_time <= 1:
                    score += 15
                    if not reason:
                        reason = "⚡ Quick win (≤1h)"

                if not reason:
                    reason = "💡 Suggested for today"

                if score > MIN_SCORE:
                    suggestions.append(
                        TaskSuggestion(
                            project_id=project.id,
                            task_id=task.id,
                            project_name=project.name,
                            task_description=task.description,
                            reason=reason,
                            score=score,
                            priority=project.priority,
                            due_date=task.due_date,
                            estimated_time=task.estimated_time,
                        )
                    )

        # sorted() is stable, so equal scores keep graph order
        suggestions = sorted(suggestions, key=lambda s: s.score, reverse=True)
        return suggestions[: self.limit]
