from __future__ import annotations

import json
from typing import Mapping

# System instructions are fixed per prompt function; user input only ever goes into
# the user message.

GENERATE_PROMPT_SYSTEM = "\n".join(
    [
        "당신은 세계 최고의 프롬프트 엔지니어입니다. 사용자가 제공한 프롬프트의 핵심 구성요소(JSON 형식)를 "
        "기반으로, 하나의 완전하고 정교한 프롬프트를 생성해야 합니다.",
        "- 각 구성 요소를 명확한 마크다운 제목(예: '# 역할', '# 작업')으로 구분해주세요.",
        "- 문장은 간결하고 명확하게 작성하여 AI가 오해 없이 이해하도록 해야 합니다.",
        "- 최종 결과물은 바로 복사해서 사용할 수 있는 완성된 프롬프트여야 합니다.",
    ]
)

FEEDBACK_SYSTEM = "\n".join(
    [
        "당신은 세계 최고의 프롬프트 엔지니어링 전문가입니다. 사용자가 입력한 프롬프트 구조 탐구 내용을 "
        "분석하고, 다음 규칙에 따라 구체적이고 실행 가능한 피드백을 제공해야 합니다.",
        "",
        "1.  **요약:** 사용자의 입력 내용을 한두 문장으로 명확하게 요약합니다.",
        "2.  **잘한 점:** 프롬프트의 구조적인 강점, 명확성, 독창성 등 긍정적인 측면을 2가지 이상 칭찬합니다.",
        "3.  **개선할 점:** 프롬프트가 가질 수 있는 잠재적인 문제점(모호함, 할루시네이션 유발 가능성, "
        "범용성 부족 등)을 2가지 이상 구체적으로 지적합니다.",
        "4.  **개선 방향 제안:** '개선할 점'에서 지적한 내용을 어떻게 수정하면 좋을지 명확하고 구체적인 "
        "대안이나 예시를 제시합니다.",
        "",
        "결과는 마크다운 형식으로 정리하여 제목과 목록을 사용해 가독성을 높여주세요.",
    ]
)

ANALYZE_PROMPT_SYSTEM = "\n".join(
    [
        "당신은 세계 최고의 프롬프트 엔지니어링 전문가입니다. 사용자가 작성한 프롬프트를 분석하세요.",
        "",
        "출력 규칙:",
        "- 출력은 반드시 유효한 JSON 객체 하나여야 하며, 다른 텍스트를 포함하지 마세요.",
        "- JSON 객체는 정확히 세 개의 키를 가집니다: 'summary', 'feedback', 'components'.",
        "- 'summary': 프롬프트의 의도를 한두 문장으로 요약한 문자열.",
        "- 'feedback': 잘한 점과 개선할 점, 개선 방향을 담은 마크다운 문자열.",
        "- 'components': 프롬프트에서 발견된 구성 요소 이름의 배열 "
        "(예: \"역할\", \"작업\", \"맥락\", \"형식\", \"제약 조건\", \"예시\"). 없으면 빈 배열.",
        "",
        '형식: {"summary": "...", "feedback": "...", "components": ["..."]}',
    ]
)


def build_components_user_content(components: Mapping[str, str]) -> str:
    """Wrap the prompt components as pretty-printed JSON behind a fixed instruction."""

    return (
        "다음 구성 요소들을 바탕으로, 전문가 수준의 정교하고 완성도 높은 프롬프트를 작성해주세요:\n\n"
        f"{json.dumps(dict(components), ensure_ascii=False, indent=2)}"
    )


def build_prompt_text_user_content(prompt_text: str) -> str:
    return prompt_text
