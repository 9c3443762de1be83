from __future__ import annotations

"""
Prompt Sets for the Artifact Tools.

Each tool is driven by one PromptSet: a system prompt per directory role
(regular, top-level, with children) and a closing instruction appended to
every user message. Edit the texts here to tune the generated artifacts.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PromptSet:
    """
    System prompts selected by the position of a directory in the tree.

    Attributes:
        system_prompt: Default prompt for regular directories.
        top_level_prompt: Prompt for the project root.
        with_children_prompt: Prompt when subdirectory content is attached.
        closing_instruction: Output guidance appended to every user message.
    """
    system_prompt: str
    top_level_prompt: str
    with_children_prompt: str
    closing_instruction: str

    def select(self, is_top_level: bool, has_children: bool) -> str:
        """Pick the system prompt for a directory role."""
        if is_top_level:
            return self.top_level_prompt
        if has_children:
            return self.with_children_prompt
        return self.system_prompt


UPDATE_EXISTING_CONTENT_PROMPT = (
    "There is existing content that may need updating. Review it and incorporate any "
    "still-relevant information, but update as needed to match the current code."
)

DOCUMENTATION_PROMPTS = PromptSet(
    system_prompt=(
        "You are a technical documentation expert. Create a concise markdown documentation file "
        "that explains the functionality of the code files in this directory. Focus on what the "
        "code does, key functions, and how the files are related. DO NOT INCLUDE CODE SAMPLES. "
        "Keep your response brief and clear."
    ),
    top_level_prompt=(
        "You are a technical documentation expert. Create a high-level markdown documentation "
        "file that explains the functionality and architecture of a code project. This is the "
        "TOP-LEVEL directory, so provide a comprehensive overview of the entire project "
        "structure. DO NOT INCLUDE CODE SAMPLES. Keep your response concise and focused on "
        "explaining what each file does and how components relate."
    ),
    with_children_prompt=(
        "You are a technical documentation expert. Create a markdown documentation file that "
        "explains the functionality of the code files in this directory. Include a section that "
        "integrates information from subdirectory documentation to show how components relate. "
        "DO NOT INCLUDE CODE SAMPLES. Simply explain what each file in the directory does and "
        "recap key information from subdirectories."
    ),
    closing_instruction=(
        "The output should be in Markdown format with appropriate headings and explanations of "
        "purpose and functionality. DO NOT INCLUDE CODE SAMPLES OR CODE BLOCKS. Simply explain "
        "what each file does and its role in the system. Focus on creating concise, practical "
        "documentation that helps developers understand the code structure quickly."
    ),
)

TESTPLAN_PROMPTS = PromptSet(
    system_prompt=(
        "You are a test engineering expert. Create a concise markdown test plan that outlines "
        "suitable tests for the code files in this directory. For each function or component: "
        "1) Identify whether it needs unit tests, integration tests, or e2e tests, 2) List "
        "common edge cases to test, 3) Determine what dependencies might need to be mocked. "
        "Keep your response focused on creating practical test strategies."
    ),
    top_level_prompt=(
        "You are a test engineering expert. Create a high-level markdown test plan that outlines "
        "a comprehensive testing strategy for this entire project. This is the TOP-LEVEL "
        "directory, so provide an overview of testing approaches for different components and "
        "how they should work together. Consider unit tests, integration tests, e2e tests, and "
        "any specialized testing needs for this codebase. Focus on practical guidance that "
        "developers can implement."
    ),
    with_children_prompt=(
        "You are a test engineering expert. Create a markdown test plan that outlines suitable "
        "tests for the code files in this directory. Include information about how tests for "
        "these components should integrate with tests for subdirectories. For each function or "
        "component: 1) Identify whether it needs unit tests, integration tests, or e2e tests, "
        "2) List common edge cases to test, 3) Determine what dependencies might need to be mocked."
    ),
    closing_instruction=(
        "The output should be a Markdown test plan with appropriate headings. Describe test "
        "cases in prose or lists rather than full test code."
    ),
)

_REVIEW_WITH_SUBDIRECTORIES = (
    "You are a senior software engineer performing a code review. Analyze the code files in "
    "this directory and its subdirectories to provide constructive feedback focusing on: "
    "1) Security issues, 2) Best practice violations, 3) Potential bugs, 4) How components "
    "interact and whether there are integration issues, 5) Duplicate functionality or "
    "opportunities to refactor. DO NOT comment on minor formatting issues or style that linters "
    "would catch. Focus on substantive issues that would improve code quality, reliability, and "
    "maintainability. Consider how this component works with its subdirectories. If the code "
    "looks good overall, acknowledge that rather than searching for minor problems."
)

REVIEW_PROMPTS = PromptSet(
    system_prompt=(
        "You are a senior software engineer performing a code review. Analyze the code files in "
        "this directory and provide constructive feedback focusing on: 1) Security issues, "
        "2) Best practice violations, 3) Potential bugs, 4) Duplicate functionality or "
        "opportunities to refactor. DO NOT comment on minor formatting issues or style that "
        "linters would catch. Focus on substantive issues that would improve code quality, "
        "reliability, and maintainability. If the code looks good overall, acknowledge that "
        "rather than searching for minor problems."
    ),
    top_level_prompt=_REVIEW_WITH_SUBDIRECTORIES,
    with_children_prompt=_REVIEW_WITH_SUBDIRECTORIES,
    closing_instruction=(
        "The output should be a Markdown code review grouped by severity. Reference files by "
        "their relative path and keep each finding actionable."
    ),
)
