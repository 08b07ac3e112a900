import html

import streamlit as st

from skyspotter.quiz.domain.models import Badge, UserStats

BADGE_ICONS = {"bronze": "⭐", "silver": "🌟", "gold": "🏅", "crown": "👑"}


def apply_styles() -> None:
    st.markdown(
        """
        <style>
            .block-container { padding-top: 1.5rem !important; max-width: 480px; }
            .stat-box { padding: 10px; background-color: #f0f2f6; border-radius: 8px;
                        text-align: center; font-weight: 600; }
            .explanation { padding: 12px; border-left: 4px solid #1f77b4;
                           background: #f7f9fc; margin: 12px 0; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_stats_header(stats: UserStats) -> None:
    col1, col2, col3 = st.columns(3)
    col1.markdown(
        f'<div class="stat-box">🏆 {stats.total_score}</div>', unsafe_allow_html=True
    )
    col2.markdown(
        f'<div class="stat-box">🔥 {stats.current_streak}</div>',
        unsafe_allow_html=True,
    )
    col3.markdown(
        f'<div class="stat-box">🎯 {stats.accuracy:.0f}%</div>', unsafe_allow_html=True
    )


def render_explanation(text: str) -> None:
    # Question data is not trusted markup
    st.markdown(
        f'<div class="explanation">{html.escape(text)}</div>',
        unsafe_allow_html=True,
    )


def render_badge(badge: Badge) -> None:
    icon = BADGE_ICONS.get(badge.tier, "⭐")
    st.markdown(
        f"{icon} **{badge.display_name}**  \n"
        f"<small>{badge.description} · {badge.date_earned.isoformat()}</small>",
        unsafe_allow_html=True,
    )
