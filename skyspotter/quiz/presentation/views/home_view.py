import streamlit as st

from skyspotter.config import GameConfig
from skyspotter.quiz.domain.models import Category, Difficulty
from skyspotter.quiz.presentation.viewmodel import QuizViewModel
from skyspotter.quiz.presentation.views import components


def render_home(vm: QuizViewModel) -> None:
    st.title(f"✈️ {GameConfig.APP_TITLE}")
    st.caption(GameConfig.APP_SUBTITLE)
    components.render_stats_header(vm.stats)

    st.subheader("Choose a category")
    for category in Category:
        label = f"{category.icon} {category.value}"
        if st.button(label, key=f"cat_{category.name}", use_container_width=True):
            vm.choose_category(category)
            st.rerun()
        st.caption(category.description)

    st.markdown("---")
    col_a, col_b = st.columns(2)
    if col_a.button("📊 Stats", use_container_width=True):
        vm.show_stats()
        st.rerun()
    if col_b.button("⚙️ Settings", use_container_width=True):
        vm.show_settings()
        st.rerun()


def render_difficulty(vm: QuizViewModel) -> None:
    category = vm.selected_category or Category.MIXED
    st.title(f"{category.icon} {category.value}")
    st.subheader("Select difficulty")

    for difficulty in Difficulty:
        label = f"{difficulty.value} · {difficulty.base_points} pts per answer"
        if st.button(label, key=f"diff_{difficulty.name}", use_container_width=True):
            vm.start_quiz(difficulty)
            st.rerun()

    if st.button("← Back"):
        vm.go_home()
        st.rerun()
