from __future__ import annotations

from lernscope.review.collaborators import OfflineReviewGenerator, ReviewGenerator
from lernscope.review.payload import build_instruction_payload
from lernscope.review.prompt import render_review_prompt
from lernscope.weeks.registry import build_registry


def _payload(course: str, week: int, text: str = "Ich heiße Ana und ich komme aus Chile."):
    registry = build_registry()
    return build_instruction_payload(registry.assert_valid(course, week), text, "Ana")


def test_prompt_lists_scope_sections() -> None:
    prompt = render_review_prompt(_payload("A1", 1))

    assert "para Ana" in prompt
    assert "Nivel: A1, Woche: 1" in prompt
    assert "- PUEDES CORREGIR: Begrüßung, Abschied, Verbformen, Wortstellung" in prompt
    assert "- NO DEBES CORREGIR (Ignora estos errores): Großschreibung, Artikeldeklination, Perfekt" in prompt
    assert "Máximo 3 puntos" in prompt
    assert prompt.endswith('"Ich heiße Ana und ich komme aus Chile."\n')


def test_prompt_includes_optional_policy_fields() -> None:
    with_extras = render_review_prompt(_payload("A1", 2))
    without_extras = render_review_prompt(_payload("A1", 1))

    assert "Tolerancia a errores: alta" in with_extras
    assert "Enfoque de la semana: Korrekte Verwendung von W-Fragen" in with_extras
    assert "Tolerancia" not in without_extras
    assert "Enfoque" not in without_extras


def test_prompt_is_stable_for_equal_payloads() -> None:
    assert render_review_prompt(_payload("A2", 1)) == render_review_prompt(_payload("A2", 1))


def test_offline_generator_satisfies_protocol() -> None:
    generator = OfflineReviewGenerator()
    feedback = generator.generate_review(_payload("A2", 2))

    assert isinstance(generator, ReviewGenerator)
    assert feedback.startswith("<p>Feedback preliminar para <strong>Ana</strong>")
    assert "como máximo 4 puntos" in feedback
