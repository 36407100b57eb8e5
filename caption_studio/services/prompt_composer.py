"""
Prompt composer for brand-voice caption rewriting.
Selects a bounded prefix of the reference captions and builds the system/user
messages for the completion API.
"""
import re
import logging
from typing import Sequence

from caption_studio.errors import DataError, ValidationError
from caption_studio.models import (
    LANGUAGE_JAPANESE,
    CaptionRequest,
    CompletionOptions,
    ComposedPrompt,
)

logger = logging.getLogger(__name__)

# Example limits keep the prompt well under the model's context window
MAX_EXAMPLES_ENGLISH = 10
MAX_EXAMPLES_JAPANESE = 6

MAX_TOKENS_ENGLISH = 500
MAX_TOKENS_JAPANESE = 800
TEMPERATURE = 0.7

EXAMPLE_SEPARATOR = '\n\n'

ENGLISH_SYSTEM_TEMPLATE = '''You are a specialized social media caption writer for a brand.
You need to rewrite captions to match the brand's voice and style while maintaining the core message.

Here are examples of the brand's caption style:

{examples}

Analyze these examples to understand the brand's tone, vocabulary, sentence structure, emoji usage, and overall style.
Create a caption that maintains this style but for new content.'''

ENGLISH_USER_TEMPLATE = '''Please rewrite the following draft caption to match our brand's voice:

Draft: {draft_caption}

Content Type: {content_type}
Content Theme: {content_theme}
Additional Requirements: {additional_notes}

Keep hashtags if present and maintain our brand's style.'''

JAPANESE_EXAMPLE_TEMPLATE = '例 {number}:\n{caption}'

JAPANESE_SYSTEM_TEMPLATE = '''あなたは日本の企業のためのソーシャルメディアキャプションのスペシャリストです。
クライアントの独自のブランドの声と文体を正確に再現し、自然で魅力的な日本語のキャプションを作成します。

以下の例を分析して、クライアントの文体を理解してください：

{examples}

これらの例を分析する際は、以下の特徴に注目してください：

1. 言語構造
   - 文末表現パターン（〜です、〜ます、〜だ、など）
   - 疑問文の構造と修辞的な質問
   - 文の長さと完全な文と文の断片の使用
   - 改行やフォーマットのパターン

2. 敬語レベル
   - 聴衆に対する敬語や丁寧語の使用
   - プロフェッショナルとカジュアルなトーンのバランス

3. 文字使用
   - 漢字、ひらがな、カタカナのバランス
   - 英語の外来語や外国語のフレーズの使用
   - ローマ字の使用とその様式的目的
   - 半角と全角文字の選択

4. 絵文字と記号パターン
   - 絵文字の頻度、配置、種類（文の始め、中間、終わり）
   - 日本特有の絵文字使用（例：🙇‍♀️, 🎐, 🎋）
   - 装飾的な記号（★, ♪, 〜など）とそのパターン
   - 顔文字（^_^）や（＼(^o^)／）などの使用

5. ハッシュタグの慣例
   - ハッシュタグの言語選択（日本語 vs 英語）
   - ハッシュタグの配置（テキストに統合、または最後にグループ化）
   - ブランド固有のハッシュタグとキャンペーンタグ
   - 一般的に使用されるハッシュタグの数

これらの特徴に基づいて、クライアントの文体を正確に再現した新しいキャプションを作成してください。'''

JAPANESE_USER_TEMPLATE = '''以下のドラフトキャプションをクライアントの文体に合わせて書き直してください：

ドラフト: {draft_caption}

コンテンツタイプ: {content_type}
コンテンツテーマ: {content_theme}
追加要件: {additional_notes}

クライアントの文体を維持しながら、元のメッセージの本質を伝える魅力的なキャプションを作成してください。'''

_PLACEHOLDER = re.compile(r'\{(\w+)\}')

DRAFT_REQUIRED_MESSAGE = 'Draft caption is required'
NO_EXAMPLES_MESSAGE = 'No example captions found. Please check your CSV file.'


def _fill(template: str, **values: str) -> str:
    """
    Single-pass placeholder substitution. Braces inside the substituted values
    are left untouched, unlike str.format.
    """
    return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def is_japanese(request: CaptionRequest) -> bool:
    return request.language == LANGUAGE_JAPANESE


def check_request(request: CaptionRequest) -> None:
    """
    Check the preconditions that can be decided before references are loaded.
    Only the Japanese path requires a draft; the English path accepts anything.

    Raises:
        ValidationError: If a Japanese request has an empty draft caption.
    """
    if is_japanese(request) and not request.draft_caption:
        raise ValidationError(DRAFT_REQUIRED_MESSAGE)


def select_examples(references: Sequence[str], language: str) -> list:
    """
    Return the first N references for the language (10 for English, 6 for Japanese).
    """
    limit = MAX_EXAMPLES_JAPANESE if language == LANGUAGE_JAPANESE else MAX_EXAMPLES_ENGLISH
    return list(references[:limit])


def format_examples(examples: Sequence[str], language: str) -> str:
    """
    Join examples with blank lines. Japanese examples get a 1-based "例 N:" label.
    """
    if language == LANGUAGE_JAPANESE:
        examples = [
            JAPANESE_EXAMPLE_TEMPLATE.format(number=number, caption=caption)
            for number, caption in enumerate(examples, 1)
        ]
    return EXAMPLE_SEPARATOR.join(examples)


def compose(request: CaptionRequest, references: Sequence[str]) -> ComposedPrompt:
    """
    Build the system and user instructions for a caption request.

    Args:
        request: The caption request (language selects the template set).
        references: Reference captions in source order.

    Returns:
        ComposedPrompt with system_instruction and user_instruction.

    Raises:
        ValidationError: Japanese request with an empty draft.
        DataError: Japanese request with no reference captions.
    """
    # Repeated here so compose() enforces its own contract when called directly;
    # CaptionService also calls it earlier to skip the reference read on bad input
    check_request(request)

    if is_japanese(request):
        if not references:
            raise DataError(NO_EXAMPLES_MESSAGE)
        system_template, user_template = JAPANESE_SYSTEM_TEMPLATE, JAPANESE_USER_TEMPLATE
    else:
        system_template, user_template = ENGLISH_SYSTEM_TEMPLATE, ENGLISH_USER_TEMPLATE

    examples = select_examples(references, request.language)
    logger.debug(f"Composing {request.language} prompt with {len(examples)} examples")

    system_instruction = _fill(system_template, examples=format_examples(examples, request.language))
    user_instruction = _fill(
        user_template,
        draft_caption=request.draft_caption,
        content_type=request.content_type or '',
        content_theme=request.content_theme or '',
        additional_notes=request.additional_notes,
    )

    return ComposedPrompt(
        system_instruction=system_instruction,
        user_instruction=user_instruction,
    )


def completion_options(request: CaptionRequest, model: str) -> CompletionOptions:
    """Token budget is 800 for Japanese, 500 for English; temperature 0.7 for both."""
    max_tokens = MAX_TOKENS_JAPANESE if is_japanese(request) else MAX_TOKENS_ENGLISH
    return CompletionOptions(model=model, max_tokens=max_tokens, temperature=TEMPERATURE)
