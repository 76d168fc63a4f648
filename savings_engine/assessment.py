"""
Assessment wizard: a fixed list of property questions followed by a contact step.

The wizard owns the answer set and the step cursor. It only moves past a
question whose answer validates, saves/restores progress through the
SecureStore, and gates the final contact submission behind the RateLimiter.
"""

import logging
from types import MappingProxyType

from savings_engine.consent_log import track_consent
from savings_engine.utils import ASSESSMENT_STORAGE_KEY
from savings_engine.validators import (
    run_validator,
    sanitize_input,
    validate_canadian_phone,
    validate_email,
)

wizard_logger = logging.getLogger('assessment')

# --- Wizard States ---
ASKING = "asking"
CONTACT = "contact"
BLOCKED = "blocked"
COMPLETED = "completed"
TERMINAL_STATES = (BLOCKED, COMPLETED)

# --- Submission Outcomes ---
SUBMIT_COMPLETED = "completed"
SUBMIT_BLOCKED = "blocked"
SUBMIT_INVALID = "invalid"

CONTACT_TEXT_FIELDS = ("name", "email", "phone")
CONTACT_FIELDS = CONTACT_TEXT_FIELDS + ("consent",)


def _question(**definition):
    # Options become tuples of read-only mappings so the whole descriptor is immutable
    definition["options"] = tuple(MappingProxyType(dict(o)) for o in definition.get("options", ()))
    definition.setdefault("help", None)
    definition.setdefault("placeholder", None)
    definition.setdefault("validator", "none")
    return MappingProxyType(definition)


QUESTIONS = (
    _question(
        id="postalCode",
        kind="free_text",
        title="question.postal.title",
        help="question.postal.help",
        placeholder="K1A 0A6",
        validator="postal_code",
    ),
    _question(
        id="propertyType",
        kind="single_select",
        title="question.property.title",
        options=[
            {"value": "detached", "label": "Detached House / Maison Détachée"},
            {"value": "semi", "label": "Semi-detached / Jumelée"},
            {"value": "townhouse", "label": "Townhouse / Maison en Rangée"},
            {"value": "condo", "label": "Condominium / Copropriété"},
            {"value": "apartment", "label": "Apartment / Appartement"},
        ],
    ),
    _question(
        id="heatingSystem",
        kind="single_select",
        title="question.heating.title",
        options=[
            {"value": "gas", "label": "Natural Gas / Gaz Naturel"},
            {"value": "electric", "label": "Electric / Électrique"},
            {"value": "oil", "label": "Oil / Mazout"},
            {"value": "propane", "label": "Propane"},
            {"value": "wood", "label": "Wood / Bois"},
            {"value": "heatpump", "label": "Heat Pump / Thermopompe"},
        ],
    ),
    _question(
        id="homeAge",
        kind="single_select",
        title="question.age.title",
        options=[
            {"value": "new", "label": "2010 or newer / 2010 ou plus récent"},
            {"value": "modern", "label": "1990-2009"},
            {"value": "established", "label": "1970-1989"},
            {"value": "mature", "label": "1950-1969"},
            {"value": "heritage", "label": "Before 1950 / Avant 1950"},
        ],
    ),
    _question(
        id="insulationLevel",
        kind="single_select",
        title="question.insulation.title",
        help="question.insulation.help",
        options=[
            {"value": "poor", "label": "Poor / Faible"},
            {"value": "fair", "label": "Fair / Passable"},
            {"value": "good", "label": "Good / Bonne"},
            {"value": "excellent", "label": "Excellent"},
        ],
    ),
)


class InvalidTransitionError(RuntimeError):
    """Raised when a wizard operation is called from a state that does not allow it."""
    pass


def new_answer_set(questions=QUESTIONS):
    """Every question id and contact field present up front: '' for text, False for consent."""
    answers = {q["id"]: "" for q in questions}
    answers.update({field: "" for field in CONTACT_TEXT_FIELDS})
    answers["consent"] = False
    return answers


def validate_contact(contact_fields):
    """Returns {field: translation_key} for every contact field that fails validation."""
    errors = {}
    if not contact_fields.get("name", "").strip():
        errors["name"] = "contact.error.name"
    if not validate_email(contact_fields.get("email", "")):
        errors["email"] = "contact.error.email"
    if not validate_canadian_phone(contact_fields.get("phone", "")):
        errors["phone"] = "contact.error.phone"
    if contact_fields.get("consent") is not True:
        errors["consent"] = "contact.error.consent"
    return errors


class AssessmentWizard:

    def __init__(self, secure_store, rate_limiter, questions=QUESTIONS, user_agent="unknown"):
        self.secure_store = secure_store
        self.rate_limiter = rate_limiter
        self.questions = tuple(questions)
        self.user_agent = user_agent
        self.answers = new_answer_set(self.questions)
        self.step = 0
        self.status = ASKING
        self.resumed = False
        self._restore()

    # --- Read-only View ---
    @property
    def question_count(self):
        return len(self.questions)

    @property
    def total_steps(self):
        return self.question_count + 1  # +1 for contact capture

    @property
    def progress_percent(self):
        return ((self.step + 1) / self.total_steps) * 100

    @property
    def current_question(self):
        if self.status == ASKING:
            return self.questions[self.step]
        return None

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATES

    def can_advance(self):
        question = self.current_question
        if question is None:
            return False
        return run_validator(question["validator"], self.answers[question["id"]])

    # --- Transitions ---
    def answer(self, question_id, raw_value):
        """Sanitizes and records an answer. Returns False (and stores nothing) once the wizard is finished."""
        if question_id not in self.answers or question_id == "consent":
            raise KeyError(f"Unknown answer field: '{question_id}'")
        if self.is_terminal:
            return False
        self.answers[question_id] = sanitize_input(raw_value)
        return True

    def advance(self):
        """Moves forward one step if the current answer validates. Returns whether it moved."""
        if not self.can_advance():
            return False
        self._move_to(self.step + 1)
        return True

    def retreat(self):
        """
        Steps back one question (contact -> last question).
        Returns False at the first question: the caller should leave the wizard.
        """
        if self.is_terminal or self.step == 0:
            return False
        self._move_to(self.step - 1)
        return True

    def save(self):
        """Persists {data, step}; see SecureStore.save for the result dict and the unencrypted fallback."""
        if self.is_terminal:
            return {"saved": False, "encrypted": False, "error": "Assessment is already finished."}
        result = self.secure_store.save(ASSESSMENT_STORAGE_KEY, {"data": dict(self.answers), "step": self.step})
        if not result["encrypted"] and result["saved"]:
            wizard_logger.warning("Assessment progress stored without encryption.")
        return result

    def submit_contact(self, contact_fields):
        """
        Final transition from the contact step.

        Returns one of:
          {"status": "invalid", "errors": {...}}     -- nothing changes, no rate-limit slot used
          {"status": "blocked"}                      -- terminal for this session
          {"status": "completed", "data": {...}}     -- answers merged with contact details
        """
        if self.status != CONTACT:
            raise InvalidTransitionError(f"Contact details can only be submitted from the contact step (state: {self.status}).")

        contact = {field: sanitize_input(contact_fields.get(field, "")) for field in CONTACT_TEXT_FIELDS}
        contact["consent"] = contact_fields.get("consent") is True

        errors = validate_contact(contact)
        if errors:
            return {"status": SUBMIT_INVALID, "errors": errors}

        if not self.rate_limiter.check():
            self.status = BLOCKED
            wizard_logger.info("Contact submission blocked by rate limiter.")
            return {"status": SUBMIT_BLOCKED}

        self.answers.update(contact)
        track_consent(self.secure_store.storage, "marketing_communications", self.user_agent,
                      clock=self.secure_store.clock)
        self.secure_store.delete(ASSESSMENT_STORAGE_KEY)
        self.status = COMPLETED
        wizard_logger.info("Assessment completed.")
        return {"status": SUBMIT_COMPLETED, "data": dict(self.answers)}

    # --- Internals ---
    def _move_to(self, step):
        self.step = max(0, min(step, self.question_count))
        self.status = CONTACT if self.step == self.question_count else ASKING

    def _restore(self):
        saved = self.secure_store.load(ASSESSMENT_STORAGE_KEY)
        if not saved:
            return
        data = saved.get("data")
        if isinstance(data, dict):
            for key, value in data.items():
                if key not in self.answers:
                    continue  # fields from an older question list
                if key == "consent":
                    self.answers[key] = value is True
                elif isinstance(value, str):
                    self.answers[key] = sanitize_input(value)
        step = saved.get("step")
        saved_step = step if isinstance(step, int) and not isinstance(step, bool) else 0
        # Never resume past a question whose restored answer does not validate
        first_unanswered = next(
            (i for i, q in enumerate(self.questions) if not run_validator(q["validator"], self.answers[q["id"]])),
            self.question_count,
        )
        self._move_to(min(saved_step, first_unanswered))
        self.resumed = True
        wizard_logger.info(f"Resumed saved assessment at step {self.step + 1} of {self.total_steps}.")
