import logging

from aiogram import Router, html
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import FSInputFile, Message, ReplyKeyboardRemove

from shop_pos.bot.keyboards import YES, main_kb, yes_no_kb
from shop_pos.bot.states import ClearConfirm
from shop_pos.config import settings
from shop_pos.core.errors import FetchError
from shop_pos.core.store import ShopStore
from shop_pos.services.receipt_pdf import generate_receipt_pdf
from shop_pos.utils.formatters import money

logger = logging.getLogger(__name__)

router = Router()

STORE: ShopStore | None = None


def setup_store(store: ShopStore) -> None:
    global STORE
    STORE = store


def _store() -> ShopStore:
    if STORE is None:
        raise RuntimeError("shop store is not configured, call setup_store() first")
    return STORE


def _is_admin(message: Message) -> bool:
    try:
        return int(message.from_user.id) == int(settings.admin_id)
    except (AttributeError, TypeError, ValueError):
        return False


def _arg_code(message: Message) -> str | None:
    parts = (message.text or "").split(maxsplit=1)
    if len(parts) < 2 or not parts[1].strip():
        return None
    return parts[1].strip()


def products_text(store: ShopStore) -> str:
    products = store.get_catalog()
    if not products:
        return "No products loaded. Try /refresh"
    lines = ["<b>Products:</b>"]
    for p in products:
        available = store.available_stock(p.code)
        mark = "" if available > 0 else " (sold out)"
        lines.append(f"• <code>{html.quote(p.code)}</code> {html.quote(p.name)} | {money(p.price)} | stock: {available}{mark}")
    return "\n".join(lines)


def cart_text(store: ShopStore) -> str:
    items = store.get_cart()
    if not items:
        return "Cart is empty."
    lines = ["<b>Cart:</b>"]
    for it in items:
        lines.append(f"• {html.quote(it.name)} — {money(it.price)} x {it.quantity} = {money(it.line_total)}")
    lines.append("")
    lines.append(f"<b>Total: {money(store.cart_total())}</b>")
    return "\n".join(lines)


@router.message(Command("start"))
async def cmd_start(message: Message):
    if not _is_admin(message):
        return
    await message.answer("✅ Shop POS is running. /help for commands", reply_markup=main_kb())


@router.message(Command("help"))
async def cmd_help(message: Message):
    if not _is_admin(message):
        return

    text = (
        "<b>Shop POS — commands</b>\n\n"
        "/products — products with stock\n"
        "/refresh — reload products from the shop service\n\n"
        "<b>Cart</b>\n"
        "/add CODE — add one item\n"
        "/inc CODE — quantity +1\n"
        "/dec CODE — quantity -1 (removes the line at 0)\n"
        "/remove CODE — remove the line\n"
        "/cart — show cart\n"
        "/clear — empty the cart (asks first)\n"
        "/checkout — sell and decrement stock\n"
        "/cancel — cancel the current prompt\n"
    )
    await message.answer(text)


@router.message(Command("cancel"))
async def cmd_cancel(message: Message, state: FSMContext):
    if not _is_admin(message):
        return
    await state.clear()
    await message.answer("❎ Cancelled.", reply_markup=ReplyKeyboardRemove())


@router.message(Command("products"))
async def cmd_products(message: Message):
    if not _is_admin(message):
        return
    await message.answer(products_text(_store()))


@router.message(Command("refresh"))
async def cmd_refresh(message: Message):
    if not _is_admin(message):
        return
    try:
        products = await _store().refresh()
    except FetchError as e:
        await message.answer(f"❌ Failed to load products: {html.quote(str(e))}")
        return
    await message.answer(f"✅ Loaded {len(products)} products")


@router.message(Command("add"))
async def cmd_add(message: Message):
    if not _is_admin(message):
        return

    code = _arg_code(message)
    if not code:
        await message.answer("Format: /add CODE")
        return

    store = _store()
    product = store.catalog.get(code)
    if product is None:
        await message.answer(f"❌ Unknown product: {html.quote(code)}")
        return

    # at the stock ceiling this is a no-op, the cart is simply shown as is
    store.add_to_cart(product)
    await message.answer(cart_text(store))


@router.message(Command("inc"))
async def cmd_inc(message: Message):
    await _update(message, +1)


@router.message(Command("dec"))
async def cmd_dec(message: Message):
    await _update(message, -1)


async def _update(message: Message, delta: int) -> None:
    if not _is_admin(message):
        return

    code = _arg_code(message)
    if not code:
        await message.answer("Format: /inc CODE or /dec CODE")
        return

    store = _store()
    store.update_quantity(code, delta)
    await message.answer(cart_text(store))


@router.message(Command("remove"))
async def cmd_remove(message: Message):
    if not _is_admin(message):
        return

    code = _arg_code(message)
    if not code:
        await message.answer("Format: /remove CODE")
        return

    store = _store()
    store.remove_item(code)
    await message.answer(cart_text(store))


@router.message(Command("cart"))
async def cmd_cart(message: Message):
    if not _is_admin(message):
        return
    await message.answer(cart_text(_store()))


@router.message(Command("clear"))
async def cmd_clear(message: Message, state: FSMContext):
    if not _is_admin(message):
        return

    if not _store().get_cart():
        await message.answer("Cart is already empty.")
        return

    await state.set_state(ClearConfirm.waiting_answer)
    await message.answer("Clear the whole cart?", reply_markup=yes_no_kb())


@router.message(ClearConfirm.waiting_answer)
async def clear_answer(message: Message, state: FSMContext):
    if not _is_admin(message):
        return

    answer = (message.text or "").strip()
    await state.clear()

    if _store().clear_cart(confirm=lambda: answer.lower() == YES.lower()):
        await message.answer("🧺 Cart cleared.", reply_markup=main_kb())
    else:
        await message.answer("Cart kept.", reply_markup=main_kb())


@router.message(Command("checkout"))
async def cmd_checkout(message: Message):
    if not _is_admin(message):
        return

    store = _store()
    if store.checkout_flow.is_submitting:
        await message.answer("⏳ Checkout is already in progress.")
        return

    outcome = await store.checkout()
    if outcome is None:
        await message.answer("Cart is empty, nothing to sell.")
        return

    if not outcome.ok:
        await message.answer(f"❌ Stock was not decremented: {html.quote(outcome.error or '')}")
        return

    await message.answer(f"✅ Sale completed. Total: {money(outcome.total)}")

    try:
        pdf_path = generate_receipt_pdf(outcome.items, outcome.total)
        await message.answer_document(FSInputFile(pdf_path))
    except OSError as e:
        logger.exception("Receipt generation failed")
        await message.answer(f"⚠️ Sale completed, but the receipt was not generated: {e}")
