import streamlit as st

from skyspotter.config import GameConfig
from skyspotter.quiz.presentation.viewmodel import QuizViewModel
from skyspotter.quiz.presentation.views import components


def render_quiz(vm: QuizViewModel) -> None:
    session = vm.session
    if session is None or session.current_question is None:
        st.error("No active quiz. Returning to menu.")
        vm.go_home()
        st.rerun()
        return

    question = session.current_question
    feedback = vm.feedback

    # Header
    col_home, col_info = st.columns([1, 4])
    if col_home.button("🏠", help="Quit quiz"):
        vm.go_home()
        st.rerun()
    col_info.markdown(
        f"**{session.current_index + 1}/{session.total_questions}** · "
        f"{session.category.value} · {session.difficulty.value} · "
        f"Score {session.score}"
    )
    st.progress(session.progress)

    image = GameConfig.image_path(question.image_ref)
    if image:
        st.image(image, use_container_width=True)
    else:
        st.info("🛩️ Image unavailable")

    st.markdown("**Which aircraft is this?**")

    # Options always come from the session's fixed permutation
    for i, option in enumerate(session.current_options):
        label = option
        if feedback:
            if option == feedback.correct_answer:
                label = f"✅ {option}"
            elif option == feedback.selected:
                label = f"❌ {option}"

        if st.button(
            label,
            key=f"opt_{session.current_index}_{i}",
            disabled=feedback is not None,
            use_container_width=True,
        ):
            vm.select_answer(option)
            st.rerun()

    if feedback:
        if feedback.is_correct:
            st.success(f"Correct! +{feedback.points_awarded} points")
        else:
            st.error(f"Wrong. It was the {feedback.correct_answer}.")
        if feedback.explanation:
            components.render_explanation(feedback.explanation)

        label = "🏁 See results" if vm.is_last_question else "Next ➡️"
        if st.button(label, type="primary", use_container_width=True):
            vm.next_question()
            st.rerun()
