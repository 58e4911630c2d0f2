"""
Client-side exam workflow: the API client, the creation wizard and the
AI question workspace. None of it touches the database directly.
"""
from examhub.client.api import ApiResult, ExamApiClient
from examhub.client.toast import Toast
from examhub.client.wizard import ExamWizard, WizardStep
from examhub.client.ai_workspace import AIWorkspace

__all__ = ["ApiResult", "ExamApiClient", "Toast", "ExamWizard", "WizardStep", "AIWorkspace"]
