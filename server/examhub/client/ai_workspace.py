"""
AI question workspace.

Holds the questions proposed by the generation endpoint while the teacher
reviews them: replace, reorder, regenerate, add manual ones and choose
which are included. Failures end up in `error`, never raised.
"""
import copy
import logging
import time
from typing import Any, Dict, List, Optional

from examhub.client.api import ExamApiClient
from examhub.client.toast import Toast
from examhub.generators import QUESTION_KINDS, normalize_difficulty

logger = logging.getLogger(__name__)

Question = Dict[str, Any]

KIND_NAMES = [kind.value for kind in QUESTION_KINDS]

MANUAL_TEMPLATES = {
    "multiple_choice": {
        "text": "Escribe aquí tu pregunta de opción múltiple…",
        "options": ["Opción A", "Opción B", "Opción C", "Opción D"],
    },
    "true_false": {"text": "Enuncia aquí tu afirmación para Verdadero/Falso…"},
    "open_exercise": {"text": "Describe aquí el enunciado del ejercicio abierto…"},
    "open_analysis": {"text": "Escribe aquí tu consigna de análisis abierto…"},
}

EMPTY_DISTRIBUTION_ERROR = "La suma de la distribución debe ser al menos 1."
NO_QUESTIONS_ERROR = "No se generaron preguntas."
GENERATION_ERROR = "Error inesperado generando preguntas."
REGENERATE_ALL_ERROR = "No se pudo regenerar el set completo."
REGENERATE_ONE_ERROR = "No se pudo regenerar esa pregunta."


def _count(value) -> int:
    try:
        return max(int(float(value)), 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def build_generation_request(values: Dict[str, Any]) -> Dict[str, Any]:
    """Turn wizard values into a generate-questions payload; the total is the distribution sum."""
    distribution = {name: _count(values.get(name)) for name in KIND_NAMES}
    return {
        "subject": values.get("subject") or "Tema general",
        "difficulty": normalize_difficulty(values.get("difficulty") or "medio"),
        "total_questions": sum(distribution.values()),
        "reference": values.get("reference") or "",
        "distribution": distribution,
        "language": "es",
    }


def clone_question(question: Question) -> Question:
    cloned = copy.deepcopy(question)
    cloned.setdefault("include", True)
    return cloned


def normalize_to_questions(data: Any) -> List[Question]:
    """
    Flatten a generation response into one list, kinds in bucket order.

    Accepts the envelope `data` (`{"questions": {...}}`), the grouped buckets
    themselves, or an already flat list.
    """
    if isinstance(data, dict) and "questions" in data:
        data = data["questions"]
    if isinstance(data, list):
        return [clone_question(q) for q in data if isinstance(q, dict)]
    if not isinstance(data, dict):
        return []

    flat = []
    for kind in KIND_NAMES:
        for question in data.get(kind) or []:
            if isinstance(question, dict):
                question = clone_question(question)
                question.setdefault("type", kind)
                flat.append(question)
    return flat


def replace_question(questions: List[Question], replacement: Question) -> List[Question]:
    return [clone_question(replacement) if q.get("id") == replacement.get("id") else q for q in questions]


def reorder_questions(questions: List[Question], from_index: int, to_index: int) -> List[Question]:
    if not 0 <= from_index < len(questions):
        return list(questions)
    reordered = list(questions)
    moved = reordered.pop(from_index)
    to_index = max(0, min(to_index, len(reordered)))
    reordered.insert(to_index, moved)
    return reordered


class AIWorkspace:
    def __init__(self, api: ExamApiClient):
        self.api = api
        self.open = False
        self.loading = False
        self.error: Optional[str] = None
        self.questions: List[Question] = []
        self.meta: Dict[str, str] = {"subject": "", "difficulty": "", "reference": ""}
        self._values: Dict[str, Any] = {}

    async def _generate(self, request: Dict[str, Any], failure_message: str) -> Optional[List[Question]]:
        result = await self.api.generate_questions(request)
        if not result.ok:
            logger.warning("Question generation failed: %s", result.error)
            self.error = result.error or failure_message
            return None
        return normalize_to_questions(result.data)

    async def propose(self, values: Dict[str, Any]) -> None:
        """Open the workspace and generate a first set from the wizard values."""
        self._values = dict(values)
        self.meta = {
            "subject": values.get("subject") or "Tema general",
            "difficulty": values.get("difficulty") or "medio",
            "reference": values.get("reference") or "",
        }
        request = build_generation_request(values)
        self.open = True
        if request["total_questions"] <= 0:
            self.questions = []
            self.error = EMPTY_DISTRIBUTION_ERROR
            return

        self.loading = True
        self.error = None
        try:
            questions = await self._generate(request, GENERATION_ERROR)
        finally:
            self.loading = False
        if questions is None:
            return
        self.questions = questions
        if not questions:
            self.error = NO_QUESTIONS_ERROR

    async def regenerate_all(self, values: Optional[Dict[str, Any]] = None) -> None:
        request = build_generation_request(values if values is not None else self._values)
        if request["total_questions"] <= 0:
            self.error = EMPTY_DISTRIBUTION_ERROR
            return
        self.loading = True
        self.error = None
        try:
            questions = await self._generate(request, REGENERATE_ALL_ERROR)
        finally:
            self.loading = False
        if questions is not None:
            self.questions = questions

    async def regenerate_one(self, question: Question, values: Optional[Dict[str, Any]] = None) -> None:
        """Replace one question with a fresh one of the same kind, keeping its id and include flag."""
        request = build_generation_request(values if values is not None else self._values)
        kind = question.get("type")
        request["distribution"] = {name: int(name == kind) for name in KIND_NAMES}
        request["total_questions"] = 1

        questions = await self._generate(request, REGENERATE_ONE_ERROR)
        if not questions:
            return
        replacement = dict(questions[0], id=question.get("id"), include=question.get("include", True))
        self.questions = replace_question(self.questions, replacement)

    def replace(self, question: Question) -> None:
        self.questions = replace_question(self.questions, question)

    def reorder(self, from_index: int, to_index: int) -> None:
        self.questions = reorder_questions(self.questions, from_index, to_index)

    def add_manual(self, kind: str, now_ms: Optional[int] = None) -> Question:
        if kind not in MANUAL_TEMPLATES:
            kind = "open_analysis"
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        qid = f"manual_{now_ms}"
        taken = {q.get("id") for q in self.questions}
        while qid in taken:
            qid = f"{qid}_{len(self.questions)}"
        question = clone_question({"id": qid, "type": kind, **MANUAL_TEMPLATES[kind], "include": True})
        self.questions = self.questions + [question]
        return question

    def included(self) -> List[Question]:
        return [q for q in self.questions if q.get("include")]

    def save(self) -> Toast:
        return Toast(f"Cambios guardados. Preguntas incluidas: {len(self.included())}.", "success")

    async def quick_save(self, title: str, course_id: str) -> Toast:
        """Persist the included questions as a quick-saved exam."""
        payload = {
            "title": title,
            "course_id": course_id,
            "subject": self.meta.get("subject"),
            "difficulty": self.meta.get("difficulty"),
            "questions": self.included(),
        }
        result = await self.api.quick_save(payload)
        if not result.ok:
            self.error = result.error
            return Toast(result.error or "Error desconocido.", "error")
        return Toast(f"Examen guardado: {result.data['title']}.", "success")
