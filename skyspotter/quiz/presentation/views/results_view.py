import streamlit as st

from skyspotter.quiz.presentation.viewmodel import QuizViewModel
from skyspotter.quiz.presentation.views import components


def render_ad_break(vm: QuizViewModel) -> None:
    st.title("🏁 Quiz complete")
    st.caption("A short message from our sponsors before your results.")
    if st.button("Continue", type="primary", use_container_width=True):
        vm.finish_ad_break()
        st.rerun()


def render_results(vm: QuizViewModel) -> None:
    controller = vm.controller
    result = controller.result
    stats = controller.final_stats or vm.stats
    if result is None:
        vm.go_home()
        st.rerun()
        return

    if result.accuracy >= 80:
        st.balloons()

    st.title("🏁 Results")
    col1, col2, col3 = st.columns(3)
    col1.metric("Score", result.score)
    col2.metric("Correct", f"{result.correct_answers}/{result.questions_answered}")
    col3.metric("Accuracy", f"{result.accuracy:.0f}%")

    st.markdown("---")
    col_a, col_b = st.columns(2)
    col_a.metric("🔥 Streak", stats.current_streak)
    col_b.metric("🏆 Total score", stats.total_score)

    if controller.new_badges:
        st.subheader("New badges")
        for badge in controller.new_badges:
            components.render_badge(badge)

    if st.button("🔄 Main Menu", type="primary", use_container_width=True):
        vm.go_home()
        st.rerun()
