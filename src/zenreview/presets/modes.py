"""Built-in check modes and system prompt assembly"""

from typing import List, Optional

from zenreview.models.mode import CheckModePreset


LINGUISTIC_RULES = """
【中文语言规范重点】
1. "的、地、得"辨析：严格区分用法。
   - "的"：形容词+的+名词 (如：红色的苹果)。
   - "地"：副词+地+动词 (如：飞快地跑)。
   - "得"：动词+得+副词 (如：跑得飞快)。
   - 示例：{"original": "高兴的跳起来", "suggestion": "高兴地跳起来", "type": "grammar", "reason": "'跳'是动词，修饰语应使用'地'"}
2. 标点符号：
   - 中文环境下必须使用全角标点（，。！？），禁止中西文标点混用。
   - 检查成对标点（“”‘’（）《》）是否闭合。
"""

PRIVACY_RULES = """
【隐私检测】
标记所有个人敏感信息（身份证、电话、银行卡、详细住址）。类型标记为 'privacy'，建议脱敏处理。
"""

SCHEMA_TRAILER = """
重要：返回纯 JSON。
Schema:
{
  "correctedText": "string",
  "issues": [
    { "original": "string", "suggestion": "string", "reason": "string", "type": "enum: typo, grammar, punctuation, style, suggestion, sensitive, privacy, format" }
  ],
  "summary": "string",
  "score": number
}
"""

TONES = {
    "general": "优美流畅",
    "academic": "学术严谨",
    "business": "商务专业",
}


CHECK_MODES = [
    CheckModePreset(
        id="fast",
        name="Fast",
        description="Typos, obvious grammar errors, punctuation",
        prompt_template="你是一名中文校对专家。快速检查：\n1. 错别字。\n2. 明显语病。\n3. 标点错误。\n" + LINGUISTIC_RULES,
    ),
    CheckModePreset(
        id="professional",
        name="Professional",
        description="Deep proofreading including compliance and privacy",
        prompt_template=(
            "你是一个专业中文校对引擎。\n" + LINGUISTIC_RULES + PRIVACY_RULES
            + "请进行深度校对，覆盖：拼写纠错、语法逻辑、标点规范、合规敏感词。"
        ),
    ),
    CheckModePreset(
        id="sensitive",
        name="Sensitive",
        description="Compliance review only: PII, advertising law, banned words",
        prompt_template=(
            "你是一名严格的内容安全审核专家。你的唯一任务是审查违规内容。\n"
            "【忽略】错别字、语法、文风问题。\n"
            "【重点】\n1. 个人隐私(PII)：身份证、电话、住址。\n"
            "2. 广告法合规：极限词（第一、顶级、最佳）。\n"
            "3. 政治与不当言论。\n"
            "请只返回 'sensitive' 或 'privacy' 类型的 Issue。"
        ),
    ),
    CheckModePreset(
        id="official",
        name="Official",
        description="Government document conventions (GB/T 9704-2012)",
        prompt_template=(
            "你是一名资深的党政机关公文审核专家。严格依据《党政机关公文处理工作条例》"
            "(GB/T 9704-2012) 和《出版物上数字用法》(GB/T 15835) 进行校对。\n"
            "【检查重点】\n1. 政治规范：领导人姓名、职务、排序及政治术语必须准确无误。\n"
            "2. 数字用法：汉字数字后用顿号，阿拉伯数字后用下脚点，带括号的序号后面不加标点。\n"
            "3. 公文用语：严禁口语化、网络用语。\n"
            "4. 标点规范：重点检查书名号、引号、序号的层级和用法。\n"
            "违反规范请标记为 'style' (规范) 或 'sensitive' (政治)。"
        ),
    ),
    CheckModePreset(
        id="polishing",
        name="Polishing",
        description="Rewrite for style while keeping the meaning",
        prompt_template=(
            "你是一名资深编辑。任务是润色和改写。\n"
            "风格：{tone}。\n目标：保持原意，提升文采，优化句式。\n"
            "请记录所有修改为 'suggestion' 或 'style'。correctedText 为最终润色版本。"
        ),
    ),
    CheckModePreset(
        id="format",
        name="Format",
        description="Typesetting: full/half width, punctuation squeeze, indentation",
        prompt_template=(
            "你是一名排版设计师。根据内容检查排版格式。\n"
            "重点：字体统一性、标点挤压（禁止行首标点）、全角半角混用、段落缩进。\n"
            "只关注 'format' 类型问题。"
        ),
    ),
]


def get_mode_by_id(mode_id: str) -> Optional[CheckModePreset]:
    """Get a check mode by its ID"""
    for mode in CHECK_MODES:
        if mode.id == mode_id:
            return mode
    return None


def build_system_prompt(
    mode_id: str = "fast",
    whitelist: Optional[List[str]] = None,
    sensitive_words: Optional[List[str]] = None,
    custom_rules: Optional[List[str]] = None,
    user_prompt: str = "",
    tone: str = "general",
) -> str:
    """Assemble the full system prompt for a check mode.

    Raises:
        ValueError: If the mode is unknown
    """
    mode = get_mode_by_id(mode_id)
    if mode is None:
        raise ValueError(f"Unknown check mode: {mode_id}")

    parts = [mode.render(TONES.get(tone, tone))]

    if whitelist:
        parts.append(
            "【绝对指令：白名单】\n以下词汇是用户指定的专用术语/人名，绝不能对其进行任何修改、"
            f"替换或纠错，必须保留原文：\n[{', '.join(whitelist)}]"
        )
    if sensitive_words:
        parts.append(
            "【绝对指令：违禁词库】\n以下是必须检测出的敏感词/违禁词。如果文中出现，"
            f"必须标记为 'sensitive' 类型，建议修改或删除：\n[{', '.join(sensitive_words)}]"
        )
    if custom_rules:
        numbered = "\n".join(f"{i}. {rule}" for i, rule in enumerate(custom_rules, 1))
        parts.append(f"【用户自定义校验规则】\n严格执行以下规则，违反者标记为 'style' 或 'sensitive'：\n{numbered}")
    if user_prompt.strip():
        parts.append(f"【用户临时指令】\n{user_prompt.strip()}")

    parts.append(SCHEMA_TRAILER)
    return "\n\n".join(part.strip() for part in parts) + "\n"
