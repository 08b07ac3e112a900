import streamlit as st

from skyspotter.quiz.presentation.viewmodel import QuizViewModel
from skyspotter.quiz.presentation.views import components


def render_stats(vm: QuizViewModel) -> None:
    stats = vm.stats
    st.title("📊 Your Stats")

    col1, col2 = st.columns(2)
    col1.metric("Total score", stats.total_score)
    col2.metric("Accuracy", f"{stats.accuracy:.1f}%")
    col1.metric("Questions answered", stats.questions_answered)
    col2.metric("Correct answers", stats.correct_answers)
    col1.metric("Current streak", stats.current_streak)
    col2.metric("Longest streak", stats.longest_streak)

    if stats.last_played_date:
        st.caption(f"Last played: {stats.last_played_date.isoformat()}")

    st.subheader("Badges")
    if not stats.badges:
        st.info("Complete a quiz to earn your first badge.")
    for badge in sorted(stats.badges, key=lambda b: b.milestone_value):
        components.render_badge(badge)

    if st.button("← Back"):
        vm.go_home()
        st.rerun()


def render_settings(vm: QuizViewModel) -> None:
    st.title("⚙️ Settings")

    entitled = st.toggle(
        "Remove ads", value=vm.stats.has_active_entitlement, key="entitlement"
    )
    if entitled != vm.stats.has_active_entitlement:
        vm.set_entitlement(entitled)
        st.rerun()

    with st.expander("Danger zone"):
        if st.button("Reset progress", type="secondary"):
            vm.reset_progress()
            st.toast("Progress reset", icon="🧹")

    if st.button("← Back"):
        vm.go_home()
        st.rerun()
