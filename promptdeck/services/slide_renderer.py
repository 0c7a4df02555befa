"""
Slide Renderer - computes a layout descriptor for each slide archetype.

render_slide is a pure function of (slide, theme, styling overrides): it never
touches storage or the network, and identical inputs always produce equal
descriptors. Unknown slide types fall through to the content layout.
"""

from typing import List, Optional

from promptdeck.models.deck import Deck
from promptdeck.models.layout import (
    Background,
    ImagePanel,
    LayoutDescriptor,
    Overlay,
    StatCard,
    TextBlock,
)
from promptdeck.models.slide import Bullets, Prose, Slide, SlideStyling
from promptdeck.models.theme import Theme

TEXT_SIZE_CLASSES = {
    'xs': 'text-xs',
    'sm': 'text-sm',
    'base': 'text-base',
    'lg': 'text-lg',
    'xl': 'text-xl',
    '2xl': 'text-2xl',
    '3xl': 'text-3xl',
    '4xl': 'text-4xl',
    '5xl': 'text-5xl',
    '6xl': 'text-6xl',
}
DEFAULT_TEXT_SIZE_CLASS = 'text-2xl'

OVERLAY_TONES = {
    'dark': ('rgba(0,0,0,0.6)', 0.6),
    'light': ('rgba(255,255,255,0.3)', 0.3),
}

TITLE_SHADOW = '2px 2px 4px rgba(0,0,0,0.5)'
SUBTITLE_SHADOW = '1px 1px 2px rgba(0,0,0,0.5)'
IMAGE_FOCUS_TITLE_SHADOW = '2px 2px 4px rgba(0,0,0,0.8)'
IMAGE_FOCUS_SUBTITLE_SHADOW = '1px 1px 2px rgba(0,0,0,0.8)'


def text_size_class(size: Optional[str]) -> str:
    """Map a size name such as '5xl' to its class, defaulting to text-2xl."""
    return TEXT_SIZE_CLASSES.get(size or '', DEFAULT_TEXT_SIZE_CLASS)


def _merge_styling(slide: Slide, overrides: Optional[SlideStyling]) -> SlideStyling:
    base = slide.styling or SlideStyling()
    if overrides is None:
        return base
    update = overrides.model_dump(exclude_none=True)
    return base.model_copy(update=update)


def _heading_font(theme: Theme) -> str:
    return theme.headingFont or theme.fontFamily


def _alignment(styling: SlideStyling, default: str) -> str:
    if styling.textAlign in ('left', 'right', 'center'):
        return styling.textAlign
    return default


def build_background(slide: Slide, theme: Theme) -> Background:
    """Background treatment selected by the slide's backgroundStyle."""
    style = slide.backgroundStyle

    if style == 'gradient':
        start = theme.gradientStart or theme.primaryColor
        end = theme.gradientEnd or theme.secondaryColor
        return Background(
            kind='linear-gradient',
            gradient_start=start,
            gradient_end=end,
            angle=135,
            css=f"linear-gradient(135deg, {start}, {end})",
        )

    if style == 'image' and slide.imageUrl:
        return Background(
            kind='image',
            image_url=slide.imageUrl,
            size='cover',
            position='center',
            css=f"url({slide.imageUrl})",
        )

    if style == 'split-color':
        return Background(
            kind='split',
            gradient_start=theme.primaryColor,
            gradient_end=theme.backgroundColor,
            angle=90,
            css=f"linear-gradient(90deg, {theme.primaryColor} 50%, {theme.backgroundColor} 50%)",
        )

    return Background(kind='solid', color=theme.backgroundColor, css=theme.backgroundColor)


def build_overlay(background: Background, styling: SlideStyling) -> Optional[Overlay]:
    """Overlay applies to image backgrounds only."""
    if background.kind != 'image':
        return None
    tone = OVERLAY_TONES.get(styling.overlay or '')
    if tone is None:
        return None
    color, opacity = tone
    return Overlay(tone=styling.overlay, color=color, opacity=opacity)


def _title_block(slide: Slide, theme: Theme, styling: SlideStyling, default_size: str, align: str, shadow: Optional[str] = None) -> TextBlock:
    return TextBlock(
        role='title',
        text=slide.title,
        size_class=text_size_class(styling.titleSize or default_size),
        weight=styling.titleWeight or 'bold',
        color=styling.titleColor or theme.primaryColor,
        font_family=_heading_font(theme),
        align=align,
        shadow=shadow,
    )


def _body_block(slide: Slide, theme: Theme, styling: SlideStyling, align: str) -> Optional[TextBlock]:
    body = slide.body
    size_class = text_size_class(styling.contentSize or 'lg')
    if isinstance(body, Prose):
        if not body.text:
            return None
        return TextBlock(role='body', text=body.text, size_class=size_class, align=align)
    if not body.items:
        return None
    return TextBlock(
        role='bullet-list',
        items=body.items,
        size_class=size_class,
        align=align,
        bullet_color=theme.accentColor or theme.secondaryColor,
    )


def _render_hero(slide, theme, styling, background):
    align = _alignment(styling, 'center')
    on_image = background.kind == 'image'
    blocks = [_title_block(slide, theme, styling, '5xl', align, TITLE_SHADOW if on_image else None)]
    if slide.subtitle:
        blocks.append(TextBlock(
            role='subtitle',
            text=slide.subtitle,
            size_class=text_size_class(styling.subtitleSize or '2xl'),
            color=styling.titleColor or theme.textColor,
            align=align,
            shadow=SUBTITLE_SHADOW if on_image else None,
        ))
    return dict(alignment=align, vertical_alignment='center', blocks=tuple(blocks))


def _render_split(slide, theme, styling, background):
    blocks = [_title_block(slide, theme, styling, '4xl', 'left')]
    body = _body_block(slide, theme, styling, 'left')
    if body is not None:
        blocks.append(body)
    image_panel = None
    if slide.imageUrl:
        image_panel = ImagePanel(url=slide.imageUrl, alt=slide.imageDescription or slide.title)
    return dict(alignment='left', vertical_alignment='center', columns=2, blocks=tuple(blocks), image_panel=image_panel)


def _render_quote(slide, theme, styling, background):
    body = slide.body
    if isinstance(body, Bullets):
        text = ' '.join(body.items)
    else:
        text = body.text
    blocks = [TextBlock(
        role='quote',
        text=text,
        size_class=text_size_class(styling.titleSize or '4xl'),
        color=styling.titleColor or theme.primaryColor,
        font_family=_heading_font(theme),
        align='center',
        italic=True,
    )]
    if slide.author:
        blocks.append(TextBlock(
            role='attribution',
            text=slide.author,
            size_class=text_size_class(styling.subtitleSize or 'xl'),
            color=theme.textColor,
            align='center',
        ))
    return dict(alignment='center', vertical_alignment='center', blocks=tuple(blocks))


def split_stat(item: str) -> StatCard:
    """'85% improvement' -> value '85%', label 'improvement'."""
    value, _, label = item.partition(' ')
    return StatCard(value=value, label=label)


def _render_stats(slide, theme, styling, background):
    blocks = (_title_block(slide, theme, styling, '4xl', 'center'),)
    cards = ()
    body = slide.body
    if isinstance(body, Bullets):
        color = theme.accentColor or theme.primaryColor
        cards = tuple(split_stat(item).model_copy(update={'color': color}) for item in body.items)
    return dict(alignment='center', vertical_alignment='top', columns=3, blocks=blocks, stat_cards=cards)


def _render_image_focus(slide, theme, styling, background):
    blocks = [TextBlock(
        role='title',
        text=slide.title,
        size_class=text_size_class(styling.titleSize or '4xl'),
        weight='bold',
        color='white',
        font_family=_heading_font(theme),
        align='left',
        shadow=IMAGE_FOCUS_TITLE_SHADOW,
    )]
    if slide.subtitle:
        blocks.append(TextBlock(
            role='subtitle',
            text=slide.subtitle,
            size_class=text_size_class(styling.subtitleSize or 'xl'),
            color='white',
            align='left',
            shadow=IMAGE_FOCUS_SUBTITLE_SHADOW,
        ))
    return dict(alignment='left', vertical_alignment='bottom', blocks=tuple(blocks))


def _render_content(slide, theme, styling, background):
    align = _alignment(styling, 'left')
    blocks = [_title_block(slide, theme, styling, '4xl', align)]
    body = _body_block(slide, theme, styling, align)
    if body is not None:
        blocks.append(body)
    return dict(alignment=align, vertical_alignment='top', blocks=tuple(blocks))


ARCHETYPE_RENDERERS = {
    'hero': ('hero', _render_hero),
    'title': ('hero', _render_hero),
    'split': ('split', _render_split),
    'quote': ('quote', _render_quote),
    'stats': ('stats', _render_stats),
    'image-focus': ('image-focus', _render_image_focus),
    'content': ('content', _render_content),
}


def render_slide(slide: Slide, theme: Theme, styling_overrides: Optional[SlideStyling] = None) -> LayoutDescriptor:
    """Compute the layout descriptor for one slide."""
    styling = _merge_styling(slide, styling_overrides)
    archetype, renderer = ARCHETYPE_RENDERERS.get(slide.type, ARCHETYPE_RENDERERS['content'])

    background = build_background(slide, theme)
    parts = renderer(slide, theme, styling, background)

    return LayoutDescriptor(
        slide_id=slide.id,
        archetype=archetype,
        background=background,
        overlay=build_overlay(background, styling),
        font_family=theme.bodyFont or theme.fontFamily or 'Inter',
        text_color=styling.titleColor or theme.textColor,
        animation=slide.animation,
        **parts,
    )


def render_deck(deck: Deck) -> List[LayoutDescriptor]:
    return [render_slide(slide, deck.theme) for slide in deck.slides]
