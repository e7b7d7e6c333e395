"""Natural-language reviewer prompt rendered from an InstructionPayload."""

from __future__ import annotations

from typing import Iterable

from .payload import InstructionPayload

TOLERANCE_LABELS = {
    "niedrig": "baja",
    "mittel": "media",
    "hoch": "alta",
}


def _join(values: Iterable[object], *, empty: str = "—") -> str:
    labels = [getattr(value, "value", str(value)) for value in values]
    return ", ".join(labels) if labels else empty


def render_review_prompt(payload: InstructionPayload) -> str:
    """Spanish-language instructions for the reviewer, feedback in simple HTML."""
    lines = [
        f"Actúa como profesor de alemán para {payload.student_name}.",
        f"Nivel: {payload.course.value}, Woche: {payload.week}",
        f"Título de la lección: {payload.title}",
        "",
        "EN CLASE SE HA VISTO (GELERNT):",
        f"- Temas: {_join(payload.taught.vocabulary)}",
        f"- Gramática: {_join(payload.taught.grammar)}",
        f"- Pragmática: {_join(payload.taught.sociopragmatics)}",
        "",
        "LO QUE EL ESTUDIANTE AÚN NO HA VISTO (NICHT GELERNT):",
        f"- Gramática: {_join(payload.not_taught.grammar)}",
        f"- Vocabulario: {_join(payload.not_taught.vocabulary)}",
        f"- Pragmática: {_join(payload.not_taught.sociopragmatics)}",
        "",
        "INSTRUCCIONES DE CORRECCIÓN PARA LA IA:",
        f"- PUEDES CORREGIR: {_join(payload.correctable_topics)}",
        f"- NO DEBES CORREGIR (Ignora estos errores): {_join(payload.forbidden_topics)}",
    ]
    if payload.focus:
        lines.append(f"- Enfoque de la semana: {_join(payload.focus)}")
    if payload.tolerance is not None:
        lines.append(f"- Tolerancia a errores: {TOLERANCE_LABELS[payload.tolerance.value]}")
    lines.extend(
        [
            "",
            "REGLAS DE SALIDA:",
            f"- Cantidad de errores: Máximo {payload.max_issues} puntos de corrección.",
        ]
    )
    if payload.avoid_over_correction:
        lines.append("- Estilo: Evitar sobre-corrección; no introduzcas gramática que aún no se ha visto.")
    lines.extend(
        [
            "- Tono: Formativo, empático y motivador (no punitivo).",
            "- Idioma del Feedback: Explicaciones en español con ejemplos claros en alemán.",
            "- Formato técnico: HTML simple (usar solo <p>, <ul>, <li>, <strong>).",
            "",
            "TEXTO DEL ESTUDIANTE A EVALUAR:",
            f'"{payload.submission_text}"',
        ]
    )
    return "\n".join(lines) + "\n"


__all__ = ["render_review_prompt"]
