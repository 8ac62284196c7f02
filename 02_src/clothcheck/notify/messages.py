"""Chat messages pushed after a rating, built on the LINE SDK models."""

from linebot.v3.messaging import (
    ButtonsTemplate,
    ImageMessage,
    PostbackAction,
    QuickReply,
    QuickReplyItem,
    TemplateMessage,
)

from ..models import RatingResult


def rating_choices(temperature: int) -> list[PostbackAction]:
    """One postback per rating; data is `<temperature>&<RESULT>`."""
    return [
        PostbackAction(label=result.label, data=f"{temperature}&{result.value}")
        for result in RatingResult
    ]


def choices_message(
    text: str, actions: list[PostbackAction], quick_reply: bool = False
) -> TemplateMessage:
    """Buttons template offering the actions, optionally also as quick replies."""
    return TemplateMessage(
        alt_text=text,
        template=ButtonsTemplate(text=text, actions=actions),
        quick_reply=QuickReply(
            items=[QuickReplyItem(action=action) for action in actions]
        )
        if quick_reply
        else None,
    )


def image_message(image_url: str, preview_url: str) -> ImageMessage:
    return ImageMessage(original_content_url=image_url, preview_image_url=preview_url)
