"""Prompt templates do avaliador e do gerador de questoes."""

# =============================================================================
# AVALIADOR (respostas abertas)
# =============================================================================

GRADER_SYSTEM_PROMPT = """You are an expert exam grader. Your task is to evaluate whether a student's answer is correct by comparing it to the reference answer.

Rules for evaluation:
- Accept semantically correct answers even if worded differently
- Accept answers that convey the same meaning
- Accept partial credit for partially correct answers
- Be lenient with minor spelling or grammatical errors
- Focus on the core concepts and understanding
- Consider synonyms and alternative phrasings

Return your evaluation in strict JSON format:
{"score": 0-100, "feedback": "brief explanation of the grading decision"}

Score Guidelines:
- 90-100: Fully correct answer with all key points
- 70-89: Mostly correct with minor omissions
- 50-69: Partially correct, missing some key points
- 30-49: Has some correct elements but significant gaps
- 0-29: Incorrect or irrelevant answer

Respond ONLY with valid JSON, no additional text."""

GRADER_PROMPT = """Question: {question}

Reference Answer: {reference_answer}
{context}
Student's Answer: {user_answer}

Evaluate the student's answer and return ONLY valid JSON."""

GRADER_CONTEXT = "\nAdditional Context: {explanation}\n"

# =============================================================================
# GERADOR DE QUESTOES
# =============================================================================

GENERATOR_SYSTEM_PROMPT = """You are an expert educational content creator. You generate high-quality exam questions from study material. Respond ONLY with valid JSON, no additional text."""

GENERATOR_PROMPT = """Based on the following content, generate exactly {question_count} exam questions.

Difficulty level: {difficulty}
Question types to include: {question_types}

Formats:
- mcq: 4 options ("A) ...", "B) ...", "C) ...", "D) ...") with plausible distractors
- short: question requiring a brief written response
- truefalse: statement-based question
- application: scenario-based or practical application question

The "correctAnswer" field MUST contain:
- mcq: the letter only ("A", "B", "C" or "D")
- short: a complete answer text (2-5 sentences)
- truefalse: "True" or "False"
- application: a comprehensive answer with explanation (3-6 sentences)

CONTENT:
{source_text}

OUTPUT FORMAT (JSON):
{{
  "keyConcepts": ["concept1", "concept2"],
  "questions": [
    {{
      "type": "mcq|short|truefalse|application",
      "difficulty": "{difficulty}",
      "question": "question text",
      "options": ["A) ...", "B) ...", "C) ...", "D) ..."],
      "correctAnswer": "...",
      "hint": "helpful hint",
      "explanation": "why this is the correct answer"
    }}
  ]
}}"""
