"""
Three-step exam creation wizard.

Holds the form values as the user typed them (strings), validates each
step before navigation and builds the create-exam payload on submit.
"""
import enum
import re
from typing import TYPE_CHECKING, Dict, Optional

from examhub.client.api import UNKNOWN_ERROR, ExamApiClient
from examhub.client.toast import Toast

if TYPE_CHECKING:
    from examhub.client.ai_workspace import AIWorkspace

MIN_ATTEMPTS, MAX_ATTEMPTS = 1, 3
MIN_TIME_MINUTES, MAX_TIME_MINUTES = 45, 240
DEFAULT_TIME_MINUTES = 45
MAX_REFERENCE_LENGTH = 1000

COUNT_FIELDS = ("multiple_choice", "true_false", "open_analysis", "open_exercise")

STEP_FIELDS = {
    0: ("subject", "difficulty", "attempts"),
    1: COUNT_FIELDS,
    2: ("time_minutes", "reference"),
}

RESET_MESSAGES = {
    0: "Datos generales limpiados.",
    1: "Cantidad de preguntas limpiada.",
    2: "Tiempo y referencia limpiados.",
}


class WizardStep(enum.IntEnum):
    GENERAL_DATA = 0
    QUESTION_COUNTS = 1
    TIME_AND_REFERENCE = 2


def _empty_values() -> Dict[str, str]:
    values = {name: "" for fields in STEP_FIELDS.values() for name in fields}
    values["time_minutes"] = str(DEFAULT_TIME_MINUTES)
    return values


def _parse_int(value) -> Optional[int]:
    """Parse an integer the way a form input would; None when blank or not a whole number."""
    text = str(value if value is not None else "").strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not number.is_integer():
        return None
    return int(number)


def validate_attempts(value) -> str:
    text = str(value if value is not None else "").strip()
    try:
        number = float(text)
    except ValueError:
        number = None
    if not text or number is None or number != number:
        return "Debes ingresar un número de intentos."
    if number < MIN_ATTEMPTS:
        return "El número de intentos debe ser al menos 1."
    if number > MAX_ATTEMPTS:
        return "El número de intentos no puede ser mayor a 3."
    if not number.is_integer():
        return "El número de intentos debe ser un número entero."
    return ""


def validate_time_minutes(value) -> str:
    number = _parse_int(value)
    if number is None:
        return "Debes ingresar el tiempo en minutos."
    if number < MIN_TIME_MINUTES:
        return f"El tiempo mínimo es {MIN_TIME_MINUTES} minutos."
    if number > MAX_TIME_MINUTES:
        return f"El tiempo máximo es {MAX_TIME_MINUTES} minutos."
    return ""


def validate_reference(value) -> str:
    if len(value or "") > MAX_REFERENCE_LENGTH:
        return f"La referencia no puede superar {MAX_REFERENCE_LENGTH} caracteres."
    return ""


def validate_count(value) -> str:
    if str(value or "").strip() == "":
        return ""
    number = _parse_int(value)
    if number is None or number < 0:
        return "Ingresa un número entero mayor o igual a 0."
    return ""


def normalize_subject(value: str) -> str:
    """Collapse whitespace runs and drop leading whitespace."""
    return re.sub(r"\s+", " ", value or "").lstrip()


class ExamWizard:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.step = WizardStep.GENERAL_DATA
        self.values: Dict[str, str] = _empty_values()
        self.errors: Dict[str, str] = {}
        self.touched: Dict[str, bool] = {}
        self.sending = False
        if initial:
            for name, value in initial.items():
                if name in self.values:
                    self.values[name] = "" if value is None else str(value)

    # -- values ----------------------------------------------------------------

    def set_value(self, name: str, value) -> None:
        if name not in self.values:
            raise KeyError(name)
        value = "" if value is None else str(value)
        if name == "subject":
            value = normalize_subject(value)
        self.values[name] = value
        self.touched[name] = True
        if name == "attempts":
            self.errors["attempts"] = validate_attempts(value)
        else:
            self.validate()

    def validate(self) -> bool:
        """Recompute field errors. True when no touched or filled field is invalid."""
        errors = dict(self.errors)
        if self.values["attempts"] or self.touched.get("attempts"):
            errors["attempts"] = validate_attempts(self.values["attempts"])
        errors["time_minutes"] = validate_time_minutes(self.values["time_minutes"])
        errors["reference"] = validate_reference(self.values["reference"])
        for name in COUNT_FIELDS:
            errors[name] = validate_count(self.values[name])
        self.errors = errors
        return not any(errors.values())

    def total_questions(self) -> int:
        total = 0
        for name in COUNT_FIELDS:
            number = _parse_int(self.values[name])
            if number is not None and number > 0:
                total += number
        return total

    # -- navigation --------------------------------------------------------------

    def valid_step(self) -> bool:
        if self.step == WizardStep.GENERAL_DATA:
            filled = all(self.values[name] for name in STEP_FIELDS[0])
            return filled and not validate_attempts(self.values["attempts"])
        if self.step == WizardStep.QUESTION_COUNTS:
            return self.total_questions() > 0
        return (
            bool(self.values["time_minutes"])
            and not validate_time_minutes(self.values["time_minutes"])
            and not validate_reference(self.values["reference"])
        )

    def next(self) -> bool:
        if self.step >= WizardStep.TIME_AND_REFERENCE or not self.valid_step():
            return False
        self.step = WizardStep(self.step + 1)
        if self.step == WizardStep.TIME_AND_REFERENCE:
            self.values["time_minutes"] = str(DEFAULT_TIME_MINUTES)
            self.errors["time_minutes"] = ""
        return True

    def back(self) -> None:
        self.step = WizardStep(max(0, self.step - 1))

    def reset_step(self) -> Toast:
        """Clear the fields of the current step."""
        for name in STEP_FIELDS[self.step]:
            self.values[name] = ""
            self.touched[name] = False
            self.errors[name] = ""
        if self.step == WizardStep.TIME_AND_REFERENCE:
            self.values["time_minutes"] = str(DEFAULT_TIME_MINUTES)
        self.validate()
        return Toast(RESET_MESSAGES[self.step], "info")

    def close(self) -> None:
        """Drop every transient value, as when the wizard is left."""
        self.step = WizardStep.GENERAL_DATA
        self.values = _empty_values()
        self.errors = {}
        self.touched = {}
        self.sending = False

    # -- submission --------------------------------------------------------------

    def snapshot(self) -> Dict[str, str]:
        return dict(self.values)

    def to_create_request(self) -> dict:
        distribution = {name: max(_parse_int(self.values[name]) or 0, 0) for name in COUNT_FIELDS}
        return {
            "subject": self.values["subject"],
            "difficulty": self.values["difficulty"],
            "attempts": _parse_int(self.values["attempts"]),
            "total_questions": self.total_questions(),
            "time_minutes": _parse_int(self.values["time_minutes"]),
            "reference": self.values["reference"] or None,
            "distribution": distribution,
        }

    def _ready_to_send(self) -> Optional[Toast]:
        """Advance intermediate steps. Returns a toast when submission must stop here."""
        if not self.validate() or not self.valid_step():
            return Toast("Revisa los campos marcados antes de continuar.", "warn")
        if self.step < WizardStep.TIME_AND_REFERENCE:
            self.next()
            return None
        if self.total_questions() <= 0:
            return Toast("Debes escoger al menos una pregunta de algún tipo.", "warn")
        return None

    async def submit(self, api: ExamApiClient) -> Optional[Toast]:
        """
        Submit the current step.

        On intermediate steps this only advances. On the last step it creates
        the exam and clears the wizard on success. Returns the toast to show,
        or None when the wizard just moved forward.
        """
        on_last_step = self.step == WizardStep.TIME_AND_REFERENCE
        stop = self._ready_to_send()
        if stop is not None or not on_last_step:
            return stop

        self.sending = True
        try:
            result = await api.create_exam(self.to_create_request())
        finally:
            self.sending = False
        if result.ok:
            self.close()
            return Toast("Examen creado correctamente.", "info")
        return Toast(result.error or UNKNOWN_ERROR, "error")

    async def submit_to_ai(self, workspace: "AIWorkspace") -> Optional[Toast]:
        """Hand the final step's values to the AI question workspace."""
        on_last_step = self.step == WizardStep.TIME_AND_REFERENCE
        stop = self._ready_to_send()
        if stop is not None or not on_last_step:
            return stop

        values = self.snapshot()
        await workspace.propose(values)
        self.close()
        if workspace.error:
            return Toast(workspace.error, "error")
        return None
