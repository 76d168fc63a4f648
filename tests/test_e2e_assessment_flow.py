from streamlit.testing.v1 import AppTest
import sys, os

current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(current_dir)
sys.path.insert(0, project_root)

from savings_engine.assessment import CONTACT, QUESTIONS, AssessmentWizard
from savings_engine.rate_limiter import RateLimiter
from savings_engine.secure_store import SecureStore
from savings_engine.storage import InMemoryStorage
from savings_engine.utils import ASSESSMENT_STORAGE_KEY

APP_PATH = os.path.join(project_root, "smart_home_savings_app.py")

ANSWERS = {
    "postalCode": "K1A 0A6",
    "propertyType": "detached",
    "heatingSystem": "oil",
    "homeAge": "heritage",
    "insulationLevel": "poor",
}


def new_app():
    return AppTest.from_file(APP_PATH, default_timeout=30)


def wizard_at_contact_step(storage):
    wizard = AssessmentWizard(SecureStore(storage), RateLimiter(storage))
    for question in QUESTIONS:
        wizard.answer(question["id"], ANSWERS[question["id"]])
        wizard.advance()
    assert wizard.status == CONTACT
    return wizard


def test_welcome_screen():
    """
    The app opens on the welcome screen with a start button.
    """

    at = new_app().run()

    assert not at.exception
    assert at.session_state.current_screen == "welcome"
    assert at.title[0].value == "🍁 Smart Home Savings"
    start_button = at.button(key="hero_start_assessment")
    assert "Start Your Free Assessment" in start_button.label


def test_start_and_answer_first_question():
    at = new_app().run()
    at.button(key="hero_start_assessment").click().run()

    assert at.session_state.current_screen == "assessment"
    assert at.title[0].value == "Energy Efficiency Assessment"
    assert at.button(key="assessment_next").disabled

    at.text_input(key="question_postalCode").input("k1a 0a6").run()
    assert not at.button(key="assessment_next").disabled

    at.button(key="assessment_next").click().run()
    assert at.session_state.wizard.step == 1
    assert at.session_state.wizard.answers["postalCode"] == "k1a 0a6"

    at.selectbox(key="question_propertyType").select_index(0).run()
    at.button(key="assessment_next").click().run()
    assert at.session_state.wizard.step == 2
    assert at.session_state.wizard.answers["propertyType"] == "detached"


def test_previous_on_first_question_returns_to_welcome():
    at = new_app().run()
    at.button(key="hero_start_assessment").click().run()
    at.button(key="assessment_previous").click().run()

    assert at.session_state.current_screen == "welcome"
    assert at.session_state.wizard is None


def test_save_then_resume_from_welcome():
    at = new_app().run()
    at.button(key="hero_start_assessment").click().run()
    at.text_input(key="question_postalCode").input("K1A 0A6").run()
    at.button(key="assessment_save").click().run()

    assert at.session_state.storage.get(ASSESSMENT_STORAGE_KEY) is not None
    at.button(key="assessment_previous").click().run()
    assert "Resume Saved Assessment" in at.button(key="hero_start_assessment").label


def test_contact_submission_shows_results():
    storage = InMemoryStorage()
    at = new_app()
    at.session_state.storage = storage
    at.session_state.wizard = wizard_at_contact_step(storage)
    at.session_state.current_screen = "assessment"
    at.run()

    at.text_input(key="contact_name").input("Jane Tremblay")
    at.text_input(key="contact_email").input("jane@example.ca")
    at.text_input(key="contact_phone").input("(613) 555-0134")
    at.checkbox(key="contact_consent").check()
    submit_button = next(b for b in at.button if "Get My Results" in b.label)
    submit_button.click().run()

    assert not at.exception
    assert at.session_state.current_screen == "results"
    assert at.session_state.assessment_result["name"] == "Jane Tremblay"
    assert at.title[0].value == "🎉 Your Personalized Energy Efficiency Report"
    assert at.metric[0].value == "$27,700"


def test_blocked_session_cannot_restart():
    at = new_app()
    at.session_state.submission_blocked = True
    at.run()
    at.button(key="hero_start_assessment").click().run()

    assert at.session_state.current_screen == "blocked"
    assert at.title[0].value == "⏳ Too Many Submissions"


def test_french_interface():
    at = new_app()
    at.session_state.language = "fr"
    at.run()

    assert at.radio(key="sidebar_language_toggle").value == "fr"
    assert "Commencer Votre Évaluation Gratuite" in at.button(key="hero_start_assessment").label


def test_edit_and_save_in_the_same_run_saves_the_edit():
    at = new_app().run()
    at.button(key="hero_start_assessment").click().run()

    at.text_input(key="question_postalCode").input("K1A 0A6")
    at.button(key="assessment_save").click().run()

    draft = SecureStore(at.session_state.storage).load(ASSESSMENT_STORAGE_KEY)
    assert draft is not None
    assert draft["data"]["postalCode"] == "K1A 0A6"


def test_clear_saved_data_updates_welcome_screen():
    at = new_app().run()
    at.button(key="hero_start_assessment").click().run()
    at.text_input(key="question_postalCode").input("K1A 0A6").run()
    at.button(key="assessment_save").click().run()
    at.button(key="assessment_previous").click().run()
    assert "Resume Saved Assessment" in at.button(key="hero_start_assessment").label

    at.button(key="hero_clear_data").click().run()

    assert at.session_state.storage.get(ASSESSMENT_STORAGE_KEY) is None
    assert "Start Your Free Assessment" in at.button(key="hero_start_assessment").label
    assert not any(b.key == "hero_clear_data" for b in at.button)
