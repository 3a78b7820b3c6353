"""Prompt templates for quiz, flash fact and feedback generation.

Every builder is a pure function: same input, same string. Variety between
quizzes comes from the model, not from here.
"""

from typing import Any, Dict

MIXED_TOPICS = "Mélange de sujets de culture générale (Maroc et International)"

MOROCCAN_TOPICS = (
    "Actualité Marocaine",
    "Finance du Maroc",
    "ANCFCC",
    "Agriculture Maroc",
    "Économie Maroc",
)

# Declared output shapes. Sent to the model as guidance; never used to validate.
QUIZ_OUTPUT_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "quiz": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "question": {"type": "STRING"},
                    "options": {"type": "ARRAY", "items": {"type": "STRING"}},
                    "answer": {"type": "STRING"},
                },
            },
        },
        "flashFacts": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
}

FLASH_FACTS_OUTPUT_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "flashFacts": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
}

FEEDBACK_OUTPUT_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "explanation": {"type": "STRING"},
        "studySuggestion": {"type": "STRING"},
    },
}

_QUIZ_RULES = """1.  **Quiz ('quiz' field):**
    *   Generate exactly {count} multiple-choice questions.
    *   Every question MUST have exactly 4 distinct, non-empty answer options.
    *   Exactly one option is correct, and the 'answer' field MUST be a verbatim copy of that option.
    *   No field may be missing or empty: every entry has 'question', 'options' and 'answer'.
    *   Each quiz you generate must be clearly different from any previous one, even for the same source. Vary topics, phrasing and distractors, and do not repeat questions within the quiz.
    *   If you cannot produce a question that follows every rule above, leave it out. If you cannot produce any, return an empty 'quiz' array. Never return malformed entries."""

_FLASH_FACTS_RULES = """2.  **Flash facts ('flashFacts' field):**
    *   Independently of the quiz, provide {facts} short, standalone sentences stating the most important facts or key takeaways.
    *   Each sentence must be informative on its own and must not repeat a quiz question or answer.
    *   If no useful fact can be extracted, return an empty 'flashFacts' array. Never return placeholder text such as "no information available"."""


def build_pdf_quiz_prompt(document_count: int, requested_count: int) -> str:
    """Instruction for a quiz built from attached PDF documents."""
    if document_count <= 0:
        return (
            "Error: No PDF documents were provided in the input. Cannot generate content.\n"
            "Do not invent questions. Return JSON with an empty 'quiz' array and an empty 'flashFacts' array."
        )
    return "\n\n".join(
        [
            "You are an expert content generator. Meticulously analyze the content of ALL "
            f"{document_count} attached PDF document(s) and produce JSON output with two fields: 'quiz' and 'flashFacts'.",
            _QUIZ_RULES.format(count=requested_count)
            + "\n    *   Cover a wide range of sections of the documents. Each correct answer must be verifiable from the document content."
            + "\n    *   Write the questions in the language of the documents.",
            _FLASH_FACTS_RULES.format(facts="3 to 8"),
            "Output format must be JSON: "
            '{"quiz": [{"question": "...", "options": ["...", "...", "...", "..."], "answer": "..."}], "flashFacts": ["..."]}',
        ]
    )


def _topic_focus(topic: str) -> str:
    if topic == MIXED_TOPICS:
        return (
            "Le sujet est un mélange : couvrez plusieurs domaines comme le football (général et marocain), "
            "l'actualité marocaine récente, la finance et la banque au Maroc, l'ANCFCC (Agence Nationale de la "
            "Conservation Foncière, du Cadastre et de la Cartographie), l'agriculture et l'économie du Maroc, "
            "ainsi que d'autres thèmes de culture générale. Assurez une bonne diversité."
        )
    if any(marker.casefold() in topic.casefold() for marker in MOROCCAN_TOPICS):
        return "Ce sujet a une connotation marocaine explicite : concentrez impérativement le contenu sur le contexte marocain."
    return (
        "Maintenez une perspective de culture générale large ; vous pouvez inclure un élément relatif au Maroc "
        "si cela diversifie le contenu."
    )


def build_topic_quiz_prompt(topic: str, requested_count: int) -> str:
    """Instruction for a French general-knowledge quiz on a topic."""
    topic = (topic or "").strip()
    if not topic:
        return (
            "Aucun sujet n'a été fourni. Ne générez aucune question : "
            "renvoyez un JSON avec un tableau 'quiz' vide et un tableau 'flashFacts' vide."
        )
    return f"""Vous êtes un expert en création de contenu éducatif et de quiz EN FRANÇAIS.
Générez un quiz à choix multiples sur le sujet de culture générale suivant : {topic}.
{_topic_focus(topic)}

Règles pour le champ 'quiz' :
- Générez exactement {requested_count} questions claires, originales et pertinentes, ni trop triviales ni trop obscures.
- Chaque question a exactement 4 options distinctes et non vides.
- Une seule option est correcte et le champ 'answer' doit reprendre cette option mot pour mot.
- Aucun champ ne doit manquer ni être vide.
- Chaque quiz doit être différent des précédents, même pour le même sujet.
- Si vous ne pouvez pas respecter ces règles pour une question, omettez-la. Si aucune question n'est possible, renvoyez un tableau 'quiz' vide.

Règles pour le champ 'flashFacts' :
- Indépendamment du quiz, donnez 2 à 3 informations flash concises sur {topic}, qui ne répètent pas les questions du quiz.
- Si aucune information utile n'est possible, renvoyez un tableau vide. N'écrivez jamais de phrase du type « aucune information disponible ».

L'intégralité du contenu doit être EN FRANÇAIS.
Format de sortie JSON : {{"quiz": [{{"question": "...", "options": ["...", "...", "...", "..."], "answer": "..."}}], "flashFacts": ["..."]}}"""


def build_flash_facts_prompt(topic: str) -> str:
    """Instruction for standalone French flash facts on a topic."""
    topic = (topic or "").strip()
    if not topic:
        return "Aucun sujet n'a été fourni. Renvoyez un JSON avec un tableau 'flashFacts' vide."
    return f"""Vous êtes un expert en création de contenu éducatif concis et pertinent EN FRANÇAIS.
Générez des informations flash (faits saillants, points clés, phrases percutantes) sur le sujet de culture générale suivant : {topic}.
{_topic_focus(topic)}

Produisez environ 3 à 5 informations flash. Chaque information est une phrase distincte, claire et informative.
Si aucune information utile n'est possible, renvoyez un tableau vide plutôt qu'une phrase de remplissage.
L'intégralité du contenu DOIT être EN FRANÇAIS.
Format de sortie JSON : {{"flashFacts": ["...", "..."]}}"""


def build_feedback_prompt(question: str, user_answer: str, correct_answer: str, context: str) -> str:
    """Instruction for a French explanation of a wrong answer."""
    return f"""Vous êtes un expert pédagogue fournissant des retours sur les questions d'un quiz.
Votre explication et votre suggestion d'étude doivent impérativement être EN FRANÇAIS.

Un utilisateur a répondu incorrectement à la question suivante.
1. 'explanation' : expliquez clairement pourquoi la réponse de l'utilisateur est incorrecte et pourquoi la bonne réponse est correcte.
2. 'studySuggestion' : indiquez de façon concise le concept clé ou la partie à étudier pour mieux comprendre cette question.

Utilisez le contexte fourni pour informer votre réponse.

Question : {question}
Réponse de l'utilisateur : {user_answer}
Réponse correcte : {correct_answer}
Contexte (peut être en anglais ou en français) : {context}

Format de sortie JSON : {{"explanation": "...", "studySuggestion": "..."}}"""
