"""
Streamlit Frontend for Dairy Ledger

This is the screen the milk provider uses every morning and evening
on the delivery round, and once a month for billing.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. One tap per customer on the route
3. Clear error messages in simple language
4. Visual feedback for all operations
5. No hidden actions

The UI never computes money itself:
- Every figure comes from the ledger functions
- Every change goes through a store method
- Statements and backups go through the flows
"""

from datetime import date
from decimal import Decimal
from typing import Optional

import streamlit as st

from dairy_ledger.audit import AuditLogger
from dairy_ledger.config import get_settings, validate_all_settings
from dairy_ledger.ledger import dashboard_summary, month_to_date, net_balance, period_report
from dairy_ledger.models import (
    Customer,
    DateRange,
    DeliveryShift,
    DeliveryStatus,
    MilkType,
    PaymentMode,
)
from dairy_ledger.orchestrator import (
    BackupFlow,
    EmptyStatementError,
    StatementFlow,
    create_app_components,
)
from dairy_ledger.services.storage import SnapshotFormatError, StorageError
from dairy_ledger.store import CustomerValidationError, DairyStore
from dairy_ledger.validation import CustomerValidator, InvalidAmountError


# Page configuration
st.set_page_config(
    page_title="Dairy Ledger",
    page_icon="🥛",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


STATUS_ICONS = {
    DeliveryStatus.PENDING: "⏳",
    DeliveryStatus.DELIVERED: "✅",
    DeliveryStatus.MISSED: "❌",
    DeliveryStatus.PAUSED: "⏸️",
}


def money(value: Decimal) -> str:
    return f"{get_settings().business.currency_label} {value:,.2f}"


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def main():
    """Main application entry point."""
    store, statement_flow, backup_flow, audit_logger = get_components()

    # Sidebar navigation
    st.sidebar.title(f"🥛 {get_settings().business.business_name}")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        [
            "🏠 Dashboard",
            "🚚 Today's Route",
            "👥 Customers",
            "🧾 Billing",
            "📊 Reports",
            "💾 Backup",
            "⚙️ Settings",
        ],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Daily routine:**
        1. Open Today's Route
        2. Tap Delivered / Missed for each house
        3. Take a backup before closing
        """
    )

    if page == "🏠 Dashboard":
        render_dashboard_page(store)
    elif page == "🚚 Today's Route":
        render_route_page(store)
    elif page == "👥 Customers":
        render_customers_page(store, audit_logger)
    elif page == "🧾 Billing":
        render_billing_page(store, statement_flow)
    elif page == "📊 Reports":
        render_reports_page(store)
    elif page == "💾 Backup":
        render_backup_page(backup_flow)
    elif page == "⚙️ Settings":
        render_settings_page(audit_logger)


def render_dashboard_page(store: DairyStore):
    """Headline numbers and the last few entries."""
    st.title("🏠 Dashboard")

    today = date.today()
    summary = dashboard_summary(store.customers, store.delivery_logs, store.payment_logs, today)

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Outstanding", money(summary.total_outstanding))
    col2.metric("Delivered Today", f"{summary.delivered_today} / {summary.active_customers}")
    col3.metric("Inactive Customers", summary.inactive_customers)

    st.markdown("### Recent Activity")
    recent = store.recent_delivery_logs(get_settings().app.recent_activity_limit)
    if not recent:
        st.info("No deliveries logged yet. Start from Today's Route.")
    for log in recent:
        customer = store.find_customer(log.customer_id)
        name = customer.name if customer else "(deleted customer)"
        st.markdown(
            f"{STATUS_ICONS[log.status]} **{name}** - {log.quantity} L on "
            f"{log.date.strftime('%d %b')} ({log.status.value})"
        )


def render_route_page(store: DairyStore):
    """The delivery round: one row per active customer on the shift."""
    st.title("🚚 Today's Route")

    col1, col2 = st.columns(2)
    with col1:
        day = st.date_input("Date", value=date.today())
    with col2:
        shift = st.selectbox(
            "Shift",
            options=list(DeliveryShift),
            format_func=lambda s: s.value,
        )

    stops = store.daily_route(day, shift)
    if not stops:
        st.info("No active customers on this shift.")
        return

    for stop in stops:
        customer = stop.customer
        with st.container():
            col1, col2, col3, col4, col5 = st.columns([3, 2, 2, 1, 1])
            with col1:
                st.markdown(
                    f"{STATUS_ICONS[stop.status]} **{customer.name}**  \n"
                    f"{customer.address}"
                )
            with col2:
                quantity = st.number_input(
                    "Litres",
                    value=float(stop.quantity),
                    min_value=0.0,
                    step=0.5,
                    key=f"qty-{customer.id}-{day}",
                )
            with col3:
                milk_type = st.selectbox(
                    "Milk",
                    options=list(MilkType),
                    index=list(MilkType).index(stop.milk_type),
                    format_func=lambda m: m.value,
                    key=f"milk-{customer.id}-{day}",
                )
            with col4:
                if st.button("Delivered", key=f"del-{customer.id}-{day}"):
                    _record_delivery(store, customer.id, day, DeliveryStatus.DELIVERED, quantity, milk_type)
            with col5:
                if st.button("Missed", key=f"miss-{customer.id}-{day}"):
                    _record_delivery(store, customer.id, day, DeliveryStatus.MISSED, quantity, milk_type)
            st.markdown("---")


def _record_delivery(
    store: DairyStore,
    customer_id: str,
    day: date,
    status: DeliveryStatus,
    quantity: float,
    milk_type: MilkType,
):
    try:
        store.set_delivery_status(customer_id, day, status, quantity=str(quantity), milk_type=milk_type)
        st.rerun()
    except InvalidAmountError as e:
        st.error(str(e))


def render_customers_page(store: DairyStore, audit_logger: AuditLogger):
    """Roster, customer form and payment entry."""
    st.title("👥 Customers")

    with st.expander("➕ Add Customer", expanded=not store.customers):
        _customer_form(store, "new-customer")

    st.markdown("### Roster")
    if not store.customers:
        st.info("No customers yet.")
        return

    logs = store.delivery_logs
    payments = store.payment_logs
    for customer in store.customers:
        due = net_balance(customer, logs, payments)
        label = f"{'⏸️ ' if customer.is_paused else ''}{customer.name} - {money(due)}"
        with st.expander(label):
            st.markdown(
                f"📞 {customer.mobile}  \n"
                f"📍 {customer.address}  \n"
                f"🥛 {customer.default_quantity} L {customer.milk_type.value}, "
                f"{customer.delivery_time.value}"
            )

            col1, col2, col3 = st.columns(3)
            with col1:
                amount = st.text_input("Payment Amount", key=f"pay-amt-{customer.id}")
            with col2:
                mode = st.selectbox(
                    "Mode",
                    list(PaymentMode),
                    format_func=lambda m: m.value,
                    key=f"pay-mode-{customer.id}",
                )
            with col3:
                pay_day = st.date_input("Date", value=date.today(), key=f"pay-day-{customer.id}")

            col1, col2, col3 = st.columns(3)
            with col1:
                if st.button("💰 Record Payment", key=f"pay-{customer.id}"):
                    try:
                        store.apply_payment(customer.id, amount, mode, pay_day)
                        st.rerun()
                    except InvalidAmountError as e:
                        st.error(str(e))
            with col2:
                toggle = "▶️ Resume" if customer.is_paused else "⏸️ Pause"
                if st.button(toggle, key=f"pause-{customer.id}"):
                    store.set_paused(customer.id, not customer.is_paused)
                    st.rerun()
            with col3:
                if st.button("🗑️ Delete", key=f"delete-{customer.id}"):
                    store.delete_customer(customer.id)
                    st.rerun()

            if st.checkbox("✏️ Edit details", key=f"edit-{customer.id}"):
                _customer_form(store, f"edit-form-{customer.id}", existing=customer)

            if audit_logger.storage is not None:
                history = audit_logger.storage.get_events_for_customer(customer.id)
                if history:
                    st.markdown("**History**")
                    for event in history[-5:]:
                        st.caption(f"{event.timestamp.strftime('%d %b %H:%M')} - {event.description}")


def _customer_form(store: DairyStore, form_key: str, existing: Optional[Customer] = None):
    """
    Add form, or an edit form pre-filled from an existing customer.

    Editing keeps the customer's id, pause flag and anything the form
    does not show.
    """
    business = get_settings().business
    validator = CustomerValidator()
    prices = existing.prices if existing else business.default_prices

    with st.form(form_key):
        name = st.text_input("Name *", value=existing.name if existing else "", key=f"{form_key}-name")
        mobile = st.text_input("Mobile *", value=existing.mobile if existing else "", key=f"{form_key}-mobile")
        address = st.text_area("Address", value=existing.address if existing else "", key=f"{form_key}-address")
        col1, col2 = st.columns(2)
        with col1:
            milk_type = st.selectbox(
                "Milk Type",
                list(MilkType),
                index=list(MilkType).index(existing.milk_type) if existing else 0,
                format_func=lambda m: m.value,
                key=f"{form_key}-milk",
            )
            quantity = st.number_input(
                "Default Litres",
                value=float(existing.default_quantity if existing else business.default_quantity),
                min_value=0.0,
                step=0.5,
                key=f"{form_key}-qty",
            )
            shift = st.selectbox(
                "Delivery Time",
                list(DeliveryShift),
                index=list(DeliveryShift).index(existing.delivery_time) if existing else 0,
                format_func=lambda s: s.value,
                key=f"{form_key}-shift",
            )
        with col2:
            cow_price = st.number_input(
                "Cow Price / L", value=float(prices.get(MilkType.COW, 0)), min_value=0.0,
                key=f"{form_key}-cow",
            )
            buffalo_price = st.number_input(
                "Buffalo Price / L", value=float(prices.get(MilkType.BUFFALO, 0)), min_value=0.0,
                key=f"{form_key}-buffalo",
            )
            balance = st.number_input(
                "Previous Due", value=float(existing.balance) if existing else 0.0, step=10.0,
                key=f"{form_key}-balance",
            )

        if st.form_submit_button("Save Customer", type="primary"):
            fields = {
                "name": name,
                "mobile": mobile,
                "address": address,
                "milk_type": milk_type,
                "default_quantity": Decimal(str(quantity)),
                "delivery_time": shift,
                "prices": {
                    MilkType.COW: Decimal(str(cow_price)),
                    MilkType.BUFFALO: Decimal(str(buffalo_price)),
                },
                "balance": Decimal(str(balance)),
            }
            customer = existing.model_copy(update=fields) if existing else Customer(**fields)
            try:
                store.upsert_customer(customer)
                st.success(f"Saved {customer.name}")
                for warning in validator.validate(customer).warnings:
                    st.warning(warning)
                if existing:
                    st.rerun()
            except CustomerValidationError as e:
                st.error(validator.get_user_friendly_summary(e.result))


def render_billing_page(store: DairyStore, statement_flow: StatementFlow):
    """Statements and period bills as PDF downloads."""
    st.title("🧾 Billing")

    if not store.customers:
        st.info("Add a customer first.")
        return

    customer = st.selectbox(
        "Customer",
        options=store.customers,
        format_func=lambda c: f"{c.name} ({c.mobile})",
    )

    today = date.today()
    default_range = month_to_date(today)
    col1, col2 = st.columns(2)
    with col1:
        start = st.date_input("From", value=default_range.start)
    with col2:
        end = st.date_input("To", value=default_range.end)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("📄 Period Bill", type="primary"):
            try:
                statement, pdf, filename = statement_flow.period_bill(customer.id, start, end)
                st.session_state.statement_download = (statement, pdf, filename)
            except EmptyStatementError as e:
                st.warning(str(e))
            except ValueError as e:
                st.error(f"Invalid date range: {e}")
    with col2:
        if st.button("📚 Full Account Statement"):
            st.session_state.statement_download = statement_flow.account_statement(customer.id)

    download = st.session_state.get("statement_download")
    if download and download[0].customer_id == customer.id:
        statement, pdf, filename = download
        box = "error-box" if statement.net_position == "owed" else "success-box"
        st.markdown(f"""
        <div class="{box}">
            <h4>{statement.title}</h4>
            <p><strong>Opening Balance:</strong> {money(statement.opening_balance)}</p>
            <p><strong>Total Bill:</strong> {money(statement.total_debit)}
               ({statement.total_litres} L)</p>
            <p><strong>Total Paid:</strong> {money(statement.total_credit)}</p>
            <p><strong>Net Receivable:</strong> {money(statement.net_receivable)}</p>
        </div>
        """, unsafe_allow_html=True)
        st.download_button(
            "⬇️ Download PDF",
            data=pdf,
            file_name=filename,
            mime="application/pdf",
        )


def render_reports_page(store: DairyStore):
    """Litres and amounts per customer for a date range."""
    st.title("📊 Reports")

    today = date.today()
    default_range = month_to_date(today)
    col1, col2, col3 = st.columns(3)
    with col1:
        start = st.date_input("From", value=default_range.start)
    with col2:
        end = st.date_input("To", value=default_range.end)
    with col3:
        milk_type = st.selectbox(
            "Milk Type",
            options=[None] + list(MilkType),
            format_func=lambda m: "All" if m is None else m.value,
        )

    try:
        date_range = DateRange(start=start, end=end)
    except ValueError as e:
        st.error(f"Invalid date range: {e}")
        return

    report = period_report(store.customers, store.delivery_logs, date_range, milk_type)

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Litres", f"{report.total_litres} L")
    col2.metric("Total Amount", money(report.total_amount))
    col3.metric("Customers", report.customer_count)

    if report.lines:
        st.dataframe(
            [
                {
                    "Customer": line.customer_name,
                    "Milk": line.milk_type.value,
                    "Days": line.delivered_count,
                    "Litres": float(line.litres),
                    "Amount": float(line.amount),
                }
                for line in report.lines
            ],
            use_container_width=True,
        )


def render_backup_page(backup_flow: BackupFlow):
    """Download a backup, or restore everything from one."""
    st.title("💾 Backup & Restore")

    st.markdown("### Backup")
    if st.button("Prepare Backup", type="primary"):
        st.session_state.backup_download = backup_flow.export_json()
    backup = st.session_state.get("backup_download")
    if backup:
        text, filename = backup
        st.download_button(
            "⬇️ Download Backup",
            data=text,
            file_name=filename,
            mime="application/json",
        )

    if st.button("Save Backup on this Device"):
        try:
            path = backup_flow.save_backup()
            st.success(f"Saved to {path}")
        except StorageError as e:
            st.error(str(e))

    st.markdown("---")
    st.markdown("### Restore")
    st.markdown("""
    <div class="warning-box">
        <p><strong>Restoring replaces ALL customers, deliveries and payments.</strong></p>
    </div>
    """, unsafe_allow_html=True)

    uploaded = st.file_uploader("Choose a backup file", type=["json"])
    if uploaded and st.button("♻️ Restore from File"):
        try:
            snapshot = backup_flow.restore(uploaded.getvalue())
            st.success(
                f"Restored {len(snapshot.customers)} customers, "
                f"{len(snapshot.delivery_logs)} deliveries and "
                f"{len(snapshot.payment_logs)} payments."
            )
        except SnapshotFormatError as e:
            st.error(str(e))
            for error in e.errors[:10]:
                st.markdown(f"- {error}")


def render_settings_page(audit_logger: AuditLogger):
    """Settings status and today's audit trail."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")
    status = validate_all_settings()
    for name in ("business", "statement", "storage", "app"):
        if status.get(name, False):
            st.success(f"✅ {name.title()} settings loaded")
        else:
            st.error(f"❌ {name.title()} - {status.get(f'{name}_error', 'Invalid')}")

    st.markdown("---")
    st.markdown("### Recent Changes")
    if audit_logger.storage is not None:
        for event in audit_logger.storage.get_recent_events(20):
            st.markdown(f"`{event.timestamp.strftime('%H:%M:%S')}` {event.description}")

    st.markdown(
        "To rebrand statements or move backups, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
