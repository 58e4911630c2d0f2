"""Per-kind generators and the OpenAI-backed generation collaborator, with the LLM faked."""
import pytest

from examhub.generators import normalize_difficulty
from examhub.generators.multiple_choice import shuffle_options
from examhub.generators.schemas import GenMultipleChoiceQuestion, GenOpenQuestion, GenTrueFalseQuestion
from examhub.schemas import Distribution
from examhub.services.llm_service import LLMNotConfigured, StructuredLLMService, llm_service
from examhub.services.prompt_management import get_system_prompt
from examhub.services.question_generation import OpenAIQuestionGenerator


def fake_response(response_model, system_prompt, user_prompt, temperature=0.7, max_tokens=None):
    if response_model is GenMultipleChoiceQuestion:
        return GenMultipleChoiceQuestion(
            text="¿Capital de Chile?", explanation="", options=["Santiago", "Lima", "Quito", "La Paz"], correct_option_index=0
        )
    if response_model is GenTrueFalseQuestion:
        return GenTrueFalseQuestion(text="El sol es una estrella", explanation="", correct_boolean=True)
    return GenOpenQuestion(text="Analiza", explanation="", expected_answer="Depende")


def test_shuffle_keeps_the_correct_option():
    options = ["a", "b", "c", "d"]
    for _ in range(20):
        shuffled, idx = shuffle_options(options, 2)
        assert sorted(shuffled) == options
        assert shuffled[idx] == "c"


@pytest.mark.parametrize("raw,label", [("Hard", "difícil"), ("facil", "fácil"), ("media", "medio"), ("", "medio"), (None, "medio")])
def test_normalize_difficulty(raw, label):
    assert normalize_difficulty(raw) == label


def test_prompts_are_interpolated():
    prompt = get_system_prompt("multiple_choice", difficulty="difícil", language="es")
    assert "difícil" in prompt
    assert "{difficulty}" not in prompt


def test_missing_api_key_is_reported(monkeypatch):
    from examhub.config import settings

    monkeypatch.setattr(settings, "openai_api_key", None)
    with pytest.raises(LLMNotConfigured):
        StructuredLLMService().client


@pytest.mark.anyio
async def test_generator_fans_out_per_distribution(monkeypatch):
    monkeypatch.setattr(llm_service, "generate_response", fake_response)
    distribution = Distribution(multiple_choice=2, true_false=1, open_analysis=0, open_exercise=1)

    questions = await OpenAIQuestionGenerator().generate(
        subject="Geografía", difficulty="medio", total_questions=4, reference=None, distribution=distribution
    )

    assert [q.type.value for q in questions] == ["multiple_choice", "multiple_choice", "true_false", "open_exercise"]
    assert len({q.id for q in questions}) == 4
    mc = questions[0]
    assert mc.options[mc.correct_option_index] == "Santiago"


@pytest.mark.anyio
async def test_failed_calls_are_dropped(monkeypatch):
    monkeypatch.setattr(llm_service, "generate_response", lambda **kwargs: None)
    questions = await OpenAIQuestionGenerator().generate(
        subject="Geografía", difficulty="medio", total_questions=2, reference=None,
        distribution=Distribution(true_false=2),
    )
    assert questions == []


@pytest.mark.anyio
async def test_unconfigured_llm_propagates(monkeypatch):
    def not_configured(**kwargs):
        raise LLMNotConfigured("OPENAI_API_KEY is not set")

    monkeypatch.setattr(llm_service, "generate_response", not_configured)
    with pytest.raises(LLMNotConfigured):
        await OpenAIQuestionGenerator().generate(
            subject="x", difficulty="medio", total_questions=1, reference=None, distribution=Distribution(true_false=1)
        )
