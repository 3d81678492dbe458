# itda/prompts/analysis_prompt.py
"""
관계 분석 프롬프트 - 함수 방식
"""

import json
from typing import Dict

LANGUAGE_NAMES = {"ko": "Korean", "en": "English"}

ANALYSIS_JSON_SHAPE = """{
  "intimacyScore": <number 0-100>,
  "balanceRatio": {
    "speaker1": { "name": "<string>", "percentage": <number> },
    "speaker2": { "name": "<string>", "percentage": <number> }
  },
  "sentiment": { "positive": <number>, "negative": <number>, "neutral": <number> },
  "avgResponseTime": {
    "speaker1": { "name": "<string>", "time": <number | null> },
    "speaker2": { "name": "<string>", "time": <number | null> }
  },
  "summary": "<string>",
  "recommendation": "<string>",
  "sentimentFlow": [
    { "time_percentage": <number 0-100>, "sentiment_score": <number -1 to 1> }
  ],
  "responseHeatmap": [<number>, ...],
  "suggestedReplies": ["<string>", ...],
  "attentionPoints": ["<string>", ...],
  "suggestedTopics": ["<string>", ...]
}"""


def get_analysis_prompt(history_text: str, mode: str, language: str) -> str:
    language_name = LANGUAGE_NAMES.get(language, "Korean")
    return f"""
You are 'It-Da', a relationship analysis AI. Analyze the conversation below and answer with structured JSON.

**Respond with ONLY valid JSON. Every natural-language field (summary, recommendation, suggestedReplies, attentionPoints, suggestedTopics) MUST be written in {language_name}.**

Context:
- Relationship Mode: {mode}
- Reflect the nuances of this relationship type.
- The history may contain several sessions accumulated over time, separated by lines of "---". Analyze all of them together.
- Speakers usually appear as 'Name: Message'. Identify the two main speakers.

Return exactly this structure:
{ANALYSIS_JSON_SHAPE}

Rules:
1. intimacyScore: 0-100 over the whole history.
2. balanceRatio: each speaker's share of total message volume, in percent.
3. sentiment: positive/negative/neutral percentages.
4. avgResponseTime: average minutes to reply per speaker, null when there are no timestamps.
5. summary: short description of the current state of the relationship.
6. recommendation: one concrete, actionable piece of advice.
7. sentimentFlow: exactly 20 points, time_percentage evenly spaced from 0 to 100 in increasing order, sentiment_score between -1 and 1.
8. responseHeatmap: exactly 24 numbers, message count per hour of day 0-23; 24 zeros when there are no timestamps.
9. suggestedReplies: 2-3 possible replies to the last message.
10. attentionPoints: 2-3 short points to be careful about in this relationship.
11. suggestedTopics: 2-3 short topic phrases suited to this relationship stage.

Conversation history:
---
{history_text}
---
"""


def get_translation_prompt(analysis: Dict, language: str) -> str:
    language_name = LANGUAGE_NAMES.get(language, "Korean")
    return f"""
You are a professional translator. Translate the JSON analysis result below into {language_name}.

Rules:
- Respond with ONLY valid JSON using exactly the same structure.
- Keep every number unchanged.
- Do NOT translate speaker names or identifiers.
- Translate summary, recommendation, suggestedReplies, attentionPoints and suggestedTopics.

Structure:
{ANALYSIS_JSON_SHAPE}

Input JSON:
{json.dumps(analysis, ensure_ascii=False)}
"""


def get_simulation_prompt(analysis: Dict, response_time_percentage: float, mode: str, language: str) -> str:
    language_name = LANGUAGE_NAMES.get(language, "Korean")
    balance = analysis["balanceRatio"]
    return f"""
You are 'It-Da', a relationship simulation expert. Predict how the relationship would change if the user altered their behavior.

**Respond with ONLY valid JSON. 'newRecommendation' MUST be in {language_name}.**

Structure:
{{
  "newIntimacyScore": <number 0-100>,
  "newRecommendation": "<string>"
}}

Current analysis:
- Relationship Mode: {mode}
- Intimacy Score: {analysis["intimacyScore"]}
- Summary: {analysis["summary"]}
- {balance["speaker1"]["name"]} talked {balance["speaker1"]["percentage"]}% of the time.
- {balance["speaker2"]["name"]} talked {balance["speaker2"]["percentage"]}% of the time.

Simulation:
The user's average response time changes by {response_time_percentage}%. Negative means replying faster, positive means slower.
Give the predicted intimacy score and a short, encouraging recommendation.
"""


def get_self_analysis_prompt(all_conversations: str) -> str:
    return f"""
You are 'It-Da', a conversation style analysis AI. The text below combines the user's conversations with several different people.
Each block starts with the other person's name in brackets. The user appears as "나", "Me" or their own name.

**Respond with ONLY valid JSON containing numbers 0-100, no text fields.**

Structure:
{{
  "initiative": <number 0-100>,
  "emotion": <number 0-100>,
  "expression": <number 0-100>,
  "tempo": <number 0-100>
}}

Axes:
1. initiative: 0-49 mostly replies, 50-100 often starts conversations.
2. emotion: 0-49 problem-solving and facts, 50-100 empathetic, emotional expressions.
3. expression: 0-49 long text messages, 50-100 frequent emoji and short messages.
4. tempo: 0-49 slow replies, 50-100 fast replies.

Combined conversations:
---
{all_conversations}
---
"""
