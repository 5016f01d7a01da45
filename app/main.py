import streamlit as st
import streamlit.components.v1 as components
import asyncio
import json
import logging
from core.assistant import FinancialAdvisorSession
from core.exceptions import InvalidStateError
from core.prompts import CURRENCY
from core.settings import settings

CHART_COLORS = ['#d97706', '#fbbf24', '#94a3b8', '#475569', '#fcd34d', '#1e293b']


def display_distribution_chart(distribution):
    chart_config = {
        "type": "doughnut",
        "data": {
            "labels": [label for label, _ in distribution],
            "datasets": [{
                "label": f"Distribución mensual ({CURRENCY})",
                "data": [round(value, 2) for _, value in distribution],
                "backgroundColor": [CHART_COLORS[i % len(CHART_COLORS)] for i in range(len(distribution))],
                "borderWidth": 1
            }]
        },
        "options": {
            "plugins": {"title": {"display": True, "text": "Distribución de Gastos"}}
        }
    }
    components.html(f"""
        <script src="https://cdn.jsdelivr.net/npm/chart.js"></script>
        <canvas id="distributionChart" width="400" height="260"></canvas>
        <script>
            const ctx = document.getElementById('distributionChart').getContext('2d');
            new Chart(ctx, {json.dumps(chart_config)});
        </script>
    """, height=320)


def display_dashboard(snapshot):
    record = snapshot["record"]
    summary = snapshot["summary"]
    st.header("Resumen Financiero")
    st.metric("Ingreso Neto", f"{CURRENCY} {summary['income']:.2f}")
    st.metric("Gastos Totales", f"{CURRENCY} {summary['total_expenses']:.2f}")
    st.metric("Saldo Disponible", f"{CURRENCY} {summary['disposable_income']:.2f}")

    if record["expenses"] and summary["distribution"]:
        display_distribution_chart(summary["distribution"])

    goal = record["savings_goal"]
    if goal:
        st.subheader(f"Meta de Ahorro: {goal['name']}")
        st.text(f"Objetivo: {CURRENCY} {goal['target_amount']:.2f}  |  Fecha: {goal['target_date']:%Y-%m-%d}")
        st.info(f"Necesita ahorrar {CURRENCY} {goal['monthly_contribution']:.2f} mensuales.")

    purchase = record["extra_purchase"]
    if purchase:
        st.subheader(f"Análisis de Compra: {purchase['name']}")
        st.text(f"Costo: {CURRENCY} {purchase['cost']:.2f}")
        if purchase["affordable"]:
            st.success(f"¡Es viable! Saldo restante tras compra: {CURRENCY} {purchase['remaining_budget']:.2f}")
        else:
            st.error(f"No es recomendable. Faltante: {CURRENCY} {purchase['shortfall']:.2f}")
            st.caption("Considere reducir gastos en categorías no esenciales.")


def run(coro):
    # One loop per browser session so the async model clients stay bound to it
    return st.session_state.loop.run_until_complete(coro)


def main():
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )
    logger = logging.getLogger(__name__)

    st.set_page_config(
        page_title="Asesor Elite - Finanzas Personales",
        page_icon="💰",
        layout="wide"
    )

    if 'loop' not in st.session_state:
        st.session_state.loop = asyncio.new_event_loop()

    with st.sidebar:
        st.header("⚙️ Sesión")
        if st.button("Reiniciar conversación"):
            st.session_state.pop('session', None)
            st.rerun()
        if 'session' in st.session_state:
            stats = st.session_state.session.get_conversation_stats()
            st.metric("Mensajes", stats["total_turns"])
            st.text(f"Fase actual: {stats['step']}")

    if 'session' not in st.session_state:
        try:
            logger.info("Initializing advisor session")
            session = FinancialAdvisorSession()
            with st.spinner("Preparando a su asesor..."):
                run(session.start())
            st.session_state.session = session
        except Exception as e:
            logger.error(f"Error initializing session: {str(e)}", exc_info=True)
            st.error(f"❌ Error initializing session: {str(e)}")
            return

    session = st.session_state.session
    chat_col, dashboard_col = st.columns(2)

    with chat_col:
        st.title("ASESOR ELITE")
        for turn in session.conversation:
            with st.chat_message("user" if turn.speaker.value == "user" else "assistant"):
                st.write(turn.text)

        prompt = st.chat_input("Escriba su respuesta...", disabled=session.is_completed or session.busy)
        if prompt:
            logger.info("Processing user prompt")
            with st.chat_message("user"):
                st.write(prompt)
            with st.chat_message("assistant"):
                with st.spinner("Analizando..."):
                    try:
                        response = run(session.submit_user_turn(prompt))
                        st.write(response)
                    except (InvalidStateError, ValueError) as e:
                        logger.warning(f"Rejected user prompt: {str(e)}")
                        st.warning(str(e))
            st.rerun()

    with dashboard_col:
        display_dashboard(session.snapshot())


if __name__ == "__main__":
    main()
