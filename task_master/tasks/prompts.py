"""
Prompt templates for the AI-backed task operations.
"""

import json
from typing import List, Optional

from task_master.tasks.models import Task

COMPLEXITY_SYSTEM_PROMPT = (
    "You are an expert software architect and project manager analyzing task "
    "complexity. Respond only with a valid JSON array, no commentary."
)

EXPAND_SYSTEM_PROMPT = (
    "You are an AI assistant helping with task breakdown for software "
    "development. Break a task into concrete, implementable subtasks. Respond "
    "only with a valid JSON array of subtask objects, no commentary."
)

RESEARCH_ADDENDUM = (
    "Use current industry best practices and up-to-date knowledge of the "
    "libraries involved when judging the work."
)


def _task_summary(task: Task) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "details": task.details,
        "dependencies": task.dependencies,
        "priority": task.priority,
    }


def build_complexity_prompt(tasks: List[Task], use_research: bool = False) -> str:
    """Prompt asking for one complexity analysis object per task."""
    payload = json.dumps([_task_summary(task) for task in tasks], indent=2)
    prompt = (
        "Analyze the complexity of the following tasks and recommend how many "
        "subtasks each should be broken into.\n\n"
        f"Tasks:\n{payload}\n\n"
        "Return a JSON array with exactly one object per task, in this format:\n"
        "[\n"
        "  {\n"
        '    "taskId": <number>,\n'
        '    "taskTitle": "<string>",\n'
        '    "complexityScore": <number 1-10>,\n'
        '    "recommendedSubtasks": <number>,\n'
        '    "expansionPrompt": "<prompt to guide breaking this task down>",\n'
        '    "reasoning": "<brief explanation of the score>"\n'
        "  }\n"
        "]"
    )
    if use_research:
        prompt += "\n\n" + RESEARCH_ADDENDUM
    return prompt


def build_expand_prompt(
    task: Task,
    num_subtasks: int,
    next_subtask_id: int,
    expansion_prompt: Optional[str] = None,
    additional_context: Optional[str] = None,
    use_research: bool = False,
) -> str:
    """Prompt asking for ``num_subtasks`` subtasks of ``task``."""
    lines = [
        f"Break down this task into exactly {num_subtasks} specific subtasks:",
        "",
        f"Task ID: {task.id}",
        f"Title: {task.title}",
        f"Description: {task.description}",
        f"Current details: {task.details or 'None provided'}",
    ]
    if task.subtasks:
        existing = ", ".join(f"{sub.id}: {sub.title}" for sub in task.subtasks)
        lines.append(f"Existing subtasks (do not repeat them): {existing}")
    if expansion_prompt:
        lines += ["", f"Guidance: {expansion_prompt}"]
    if additional_context:
        lines += ["", f"Additional context: {additional_context}"]
    if use_research:
        lines += ["", RESEARCH_ADDENDUM]
    lines += [
        "",
        f"Number the subtasks sequentially starting from {next_subtask_id}.",
        "Dependencies may only name subtask ids of this same task.",
        "Return a JSON array of objects in this format:",
        "[",
        "  {",
        f'    "id": {next_subtask_id},',
        '    "title": "<string>",',
        '    "description": "<string>",',
        '    "details": "<implementation details>",',
        '    "dependencies": [<subtask ids>],',
        '    "testStrategy": "<how to verify>"',
        "  }",
        "]",
    ]
    return "\n".join(lines)
