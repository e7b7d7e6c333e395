"""Closed vocabularies shared by the week schema and the correction policy."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Iterable, List, Mapping, Tuple, Type, TypeVar


E = TypeVar("E", bound=Enum)


class CourseLevel(str, Enum):
    """Curriculum tracks known to the registry."""

    A1 = "A1"
    A2 = "A2"

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


class Tolerance(str, Enum):
    """How forgiving the reviewer should be this week."""

    LOW = "niedrig"
    MEDIUM = "mittel"
    HIGH = "hoch"

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


class GrammarTopic(str, Enum):
    """Discrete grammar units of the Alemán 1 / Alemán 2 programme."""

    VERBZWEITSTELLUNG = "Verbzweitstellung"
    AUSSAGESATZ = "Aussagesatz"
    W_FRAGEN = "W-Fragen"
    JA_NEIN_FRAGEN = "Ja/Nein-Fragen"
    KONJUGATION = "Konjugation"
    PERSONALPRONOMEN = "Personalpronomen"
    NOMINATIV = "Nominativ"
    AKKUSATIV = "Akkusativ"
    DATIV = "Dativ"
    GENITIV = "Genitiv"
    ARTIKEL = "Artikel"
    TRENNBARE_VERBEN = "Trennbare Verben"
    MODALVERBEN = "Modalverben"
    POSSESSIVARTIKEL = "Possessivartikel"
    INDEFINITPRONOMEN = "Indefinitpronomen"
    ZAHLEN = "Zahlen"
    PLURAL = "Plural"
    NEGATION = "Negation"
    ADVERBIEN = "Adverbien"
    ADJEKTIVE = "Adjektive"
    PERFEKT = "Perfekt"
    PRAETERITUM = "Präteritum"
    PLUSQUAMPERFEKT = "Plusquamperfekt"
    FUTUR = "Futur"
    KONJUNKTIV = "Konjunktiv"
    PASSIV = "Passiv"
    NEBENSAETZE = "Nebensätze"
    REFLEXIVPRONOMEN = "Reflexivpronomen"
    RELATIVSAETZE = "Relativsätze"
    INFINITIV_MIT_ZU = "Infinitiv mit zu"

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


class VocabularyTopic(str, Enum):
    """Vocabulary themes and word fields."""

    BEGRUESSUNGEN = "Begrüßungen"
    ABSCHIED = "Abschied"
    HERKUNFT = "Herkunft"
    WOHNORT = "Wohnort"
    PERSONALINFORMATIONEN = "Personalinformationen"
    IDENTITAET = "Identität"
    ORTSANGABEN = "Ortsangaben"
    ALTER = "Alter"
    NAMEN = "Namen"
    ALPHABET = "Alphabet"
    LAENDER = "Länder"
    SPRACHEN = "Sprachen"
    BERUFE = "Berufe"
    BERUFSLEBEN = "Berufsleben"
    FAMILIE = "Familie"
    HOBBYS = "Hobbys"
    KLEIDUNG = "Kleidung"
    ESSEN = "Essen"
    LEBENSMITTEL = "Lebensmittel"
    GETRAENKE = "Getränke"
    VERPACKUNGEN = "Verpackungen"
    MASSEINHEITEN = "Maßeinheiten"
    HAUSHALTSACHEN = "Haushaltsachen"
    SCHULSACHEN = "Schulsachen"
    WOCHENTAGE = "Wochentage"
    UHRZEIT = "Uhrzeit"
    TAGESABLAUF = "Tagesablauf"
    AKTIVITAETEN = "Aktivitäten"
    GEFUEHLE = "Gefühle"
    WETTER = "Wetter"
    REISEN = "Reisen"
    RESTAURANT = "Restaurant"

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


class SociopragmaticTopic(str, Enum):
    """Register and situational-use topics."""

    DU_SIE = "du/Sie"
    FORMELLE_SITUATION = "formelle Situation"
    INFORMELLE_SITUATION = "informelle Situation"
    NONVERBALE_KOMMUNIKATION = "nonverbale Kommunikation"
    UMGANGSSPRACHE = "Umgangssprache"
    REGIONALISMEN = "Regionalismen"
    PRAEPOSITIONEN = "Präpositionen"
    ZEITANGABEN = "Zeitangaben"
    RESTAURANT = "Restaurant"
    EINKAUFEN = "Einkaufen"
    FAMILIENSTAND = "Familienstand"

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


class CorrectionTopic(str, Enum):
    """Everything a correction policy can permit or forbid."""

    BEGRUESSUNG = "Begrüßung"
    ABSCHIED = "Abschied"
    VERBFORMEN = "Verbformen"
    WORTSTELLUNG = "Wortstellung"
    W_FRAGEN = "W-Fragen"
    JA_NEIN_FRAGEN = "Ja/Nein-Fragen"
    STUNDENANGABE = "Stundenangabe"
    NOMINATIV = "Nominativ"
    AKKUSATIV = "Akkusativ"
    DATIV = "Dativ"
    GENITIV = "Genitiv"
    ARTIKEL = "Artikel"
    ARTIKELDEKLINATION = "Artikeldeklination"
    TRENNBARE_VERBEN = "Trennbare Verben"
    POSSESSIVARTIKEL = "Possessivartikel"
    PLURAL = "Plural"
    NEGATION = "Negation"
    MODALVERBEN = "Modalverben"
    ZAHLEN = "Zahlen"
    ADJEKTIVE = "Adjektive"
    GROSSSCHREIBUNG = "Großschreibung"
    INTERPUNKTION = "Interpunktion"
    NEBENSAETZE = "Nebensätze"
    PERFEKT = "Perfekt"
    PRAETERITUM = "Präteritum"
    PLUSQUAMPERFEKT = "Plusquamperfekt"
    FUTUR = "Futur"
    KONJUNKTIV = "Konjunktiv"
    PASSIV = "Passiv"
    REFLEXIVPRONOMEN = "Reflexivpronomen"
    RELATIVSAETZE = "Relativsätze"
    INFINITIV_MIT_ZU = "Infinitiv mit zu"
    VOKABULAR_GELERNT = "Vokabular gelernt"
    VOKABULAR_NICHT_GELERNT = "Vokabular nicht gelernt"

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


_G = GrammarTopic
_V = VocabularyTopic
_C = CorrectionTopic

_VOCABULARY_CORRECTIONS = {
    _V.BEGRUESSUNGEN: frozenset({_C.BEGRUESSUNG}),
    _V.ABSCHIED: frozenset({_C.ABSCHIED}),
    _V.UHRZEIT: frozenset({_C.STUNDENANGABE}),
}

# Every grammar and vocabulary topic is listed; an empty set means no
# correction topic covers it.
CORRECTION_TOPICS: Mapping[Enum, FrozenSet[CorrectionTopic]] = MappingProxyType(
    {
        _G.VERBZWEITSTELLUNG: frozenset({_C.WORTSTELLUNG}),
        _G.AUSSAGESATZ: frozenset({_C.WORTSTELLUNG}),
        _G.W_FRAGEN: frozenset({_C.W_FRAGEN}),
        _G.JA_NEIN_FRAGEN: frozenset({_C.JA_NEIN_FRAGEN}),
        _G.KONJUGATION: frozenset({_C.VERBFORMEN}),
        _G.PERSONALPRONOMEN: frozenset(),
        _G.NOMINATIV: frozenset({_C.NOMINATIV}),
        _G.AKKUSATIV: frozenset({_C.AKKUSATIV}),
        _G.DATIV: frozenset({_C.DATIV}),
        _G.GENITIV: frozenset({_C.GENITIV}),
        _G.ARTIKEL: frozenset({_C.ARTIKEL, _C.ARTIKELDEKLINATION}),
        _G.TRENNBARE_VERBEN: frozenset({_C.TRENNBARE_VERBEN}),
        _G.MODALVERBEN: frozenset({_C.MODALVERBEN}),
        _G.POSSESSIVARTIKEL: frozenset({_C.POSSESSIVARTIKEL}),
        _G.INDEFINITPRONOMEN: frozenset(),
        _G.ZAHLEN: frozenset({_C.ZAHLEN}),
        _G.PLURAL: frozenset({_C.PLURAL}),
        _G.NEGATION: frozenset({_C.NEGATION}),
        _G.ADVERBIEN: frozenset(),
        _G.ADJEKTIVE: frozenset({_C.ADJEKTIVE}),
        _G.PERFEKT: frozenset({_C.PERFEKT}),
        _G.PRAETERITUM: frozenset({_C.PRAETERITUM}),
        _G.PLUSQUAMPERFEKT: frozenset({_C.PLUSQUAMPERFEKT}),
        _G.FUTUR: frozenset({_C.FUTUR}),
        _G.KONJUNKTIV: frozenset({_C.KONJUNKTIV}),
        _G.PASSIV: frozenset({_C.PASSIV}),
        _G.NEBENSAETZE: frozenset({_C.NEBENSAETZE}),
        _G.REFLEXIVPRONOMEN: frozenset({_C.REFLEXIVPRONOMEN}),
        _G.RELATIVSAETZE: frozenset({_C.RELATIVSAETZE}),
        _G.INFINITIV_MIT_ZU: frozenset({_C.INFINITIV_MIT_ZU}),
        **{topic: _VOCABULARY_CORRECTIONS.get(topic, frozenset()) for topic in VocabularyTopic},
    }
)

# Orthography and unlearned vocabulary are never flagged at these levels.
NEVER_CORRECTABLE: FrozenSet[CorrectionTopic] = frozenset(
    {_C.GROSSSCHREIBUNG, _C.INTERPUNKTION, _C.VOKABULAR_NICHT_GELERNT}
)
# Core communicative skills of every week; they cannot be switched off.
ALWAYS_CORRECTABLE: FrozenSet[CorrectionTopic] = frozenset(
    {_C.BEGRUESSUNG, _C.ABSCHIED, _C.VERBFORMEN, _C.WORTSTELLUNG, _C.VOKABULAR_GELERNT}
)


def correction_topics_for(topic: Enum) -> FrozenSet[CorrectionTopic]:
    """Correction topics that flag errors in a grammar or vocabulary topic.

    ``GrammarTopic.KONJUGATION`` maps to ``{CorrectionTopic.VERBFORMEN}``,
    ``GrammarTopic.ARTIKEL`` to both ``ARTIKEL`` and ``ARTIKELDEKLINATION``.
    """
    return CORRECTION_TOPICS.get(topic, frozenset())


def in_declaration_order(members: Iterable[E], enum_cls: Type[E]) -> Tuple[E, ...]:
    """Order a set of enum members the way the enum declares them."""
    wanted = set(members)
    return tuple(member for member in enum_cls if member in wanted)


__all__ = [
    "ALWAYS_CORRECTABLE",
    "CORRECTION_TOPICS",
    "CorrectionTopic",
    "CourseLevel",
    "GrammarTopic",
    "NEVER_CORRECTABLE",
    "SociopragmaticTopic",
    "Tolerance",
    "VocabularyTopic",
    "correction_topics_for",
    "in_declaration_order",
]
