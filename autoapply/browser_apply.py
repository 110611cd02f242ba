"""
Browser side of the apply step.
Uses Playwright to open a job, press its Apply button, read the form's fields
(label text and input kind) and fill them with the answers chosen by autofill.
Forms are never submitted.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from playwright.async_api import BrowserContext, Page
from playwright.async_api import Error as PlaywrightError

from autoapply.autofill import AnswerProvider, autofill
from autoapply.log import get_logger
from autoapply.matcher import FieldDescriptor
from autoapply.models import INPUT_KINDS, Configuration, JobRecord
from autoapply.retry import retry

log = get_logger(__name__)

APPLY_BUTTONS: list[str] = [
    "#indeedApplyButton",
    'button:has-text("Apply now")',
    'a:has-text("Apply now")',
    'button[id*="apply"]',
]
TRUTHY: frozenset[str] = frozenset({"yes", "true", "1", "on", "checked", "y"})

_FIELDS_JS = """() => {
    const skip = ['hidden', 'submit', 'button', 'file', 'image', 'reset', 'password'];
    const seenGroups = new Set();
    const text = (el) => (el ? (el.innerText || el.textContent || '') : '').trim();
    const labelFor = (el) => {
        if (el.labels && el.labels.length) return text(el.labels[0]);
        if (el.getAttribute('aria-label')) return el.getAttribute('aria-label');
        const by = el.getAttribute('aria-labelledby');
        if (by && document.getElementById(by)) return text(document.getElementById(by));
        return el.placeholder || '';
    };
    const out = [];
    for (const el of document.querySelectorAll('input, textarea, select')) {
        const kind = (el.tagName === 'INPUT' ? (el.type || 'text') : el.tagName).toLowerCase();
        if (skip.includes(kind) || el.disabled || el.offsetParent === null) continue;
        let selector, label;
        if (kind === 'radio') {
            if (!el.name || seenGroups.has(el.name)) continue;
            seenGroups.add(el.name);
            const legend = el.closest('fieldset') && el.closest('fieldset').querySelector('legend');
            label = legend ? text(legend) : labelFor(el);
            selector = `input[type="radio"][name="${CSS.escape(el.name)}"]`;
        } else if (el.id) {
            selector = `#${CSS.escape(el.id)}`;
            label = labelFor(el);
        } else if (el.name) {
            selector = `${el.tagName.toLowerCase()}[name="${CSS.escape(el.name)}"]`;
            label = labelFor(el);
        } else {
            continue;
        }
        out.push({label, kind, selector});
    }
    return out;
}"""


@dataclass(frozen=True)
class FormField:
    descriptor: FieldDescriptor
    selector: str


async def _visible(locator) -> bool:
    """Safe visibility check that never throws."""
    try:
        return await locator.count() > 0 and await locator.first.is_visible()
    except PlaywrightError:
        return False


async def _click_first_visible(page: Page, selectors: list[str]) -> bool:
    """Try clicking the first visible element matching any selector."""
    for sel in selectors:
        loc = page.locator(sel)
        if await _visible(loc):
            try:
                await loc.first.click(timeout=3000)
                return True
            except PlaywrightError:
                continue
    return False


@retry(max_attempts=2, base_delay=1.5, retryable=(PlaywrightError,))
async def open_page(page: Page, url: str) -> None:
    await page.goto(url, wait_until="domcontentloaded", timeout=25_000)


async def collect_fields(page: Page) -> list[FormField]:
    """Visible, labelled form fields in document order."""
    fields: list[FormField] = []
    for raw in await page.evaluate(_FIELDS_JS):
        label = " ".join((raw.get("label") or "").split())
        if not label:
            continue
        kind = raw["kind"] if raw["kind"] in INPUT_KINDS else "text"
        fields.append(FormField(FieldDescriptor(label, kind), raw["selector"]))
    return fields


async def _check_radio(page: Page, selector: str, value: str) -> bool:
    wanted = value.strip().lower()
    for option in await page.locator(selector).all():
        option_value = (await option.get_attribute("value") or "").strip().lower()
        option_label = (await option.evaluate(
            "el => el.labels && el.labels.length ? el.labels[0].innerText : ''"
        )).strip().lower()
        if wanted in (option_value, option_label):
            await option.check(timeout=3000)
            return True
    log.debug("No radio option %r for %s", value, selector)
    return False


async def fill_field(page: Page, field: FormField, value: str) -> bool:
    kind = field.descriptor.input_kind
    loc = page.locator(field.selector).first
    try:
        if kind == "radio":
            return await _check_radio(page, field.selector, value)
        if kind == "select":
            try:
                await loc.select_option(label=value, timeout=3000)
            except PlaywrightError:
                await loc.select_option(value=value, timeout=3000)
        elif kind == "checkbox":
            if value.strip().lower() in TRUTHY:
                await loc.check(timeout=3000)
            else:
                await loc.uncheck(timeout=3000)
        else:
            await loc.fill(value, timeout=3000)
        return True
    except PlaywrightError as e:
        log.warning("  ✗ could not fill %r: %s", field.descriptor.label_text, str(e)[:80].split("\n")[0])
        return False


async def apply_to_job(
    context: BrowserContext,
    job: JobRecord,
    config: Configuration,
    answer_provider: Optional[AnswerProvider] = None,
) -> tuple[bool, str]:
    """Open the job, start its application and fill the form fields.

    Answers supplied by ``answer_provider`` are appended to ``config`` as
    learned patterns; the caller persists them.
    """
    page = await context.new_page()
    try:
        await open_page(page, job.apply_url)
        if await _click_first_visible(page, APPLY_BUTTONS):
            await page.wait_for_load_state("domcontentloaded")
        fields = await collect_fields(page)
        if not fields:
            return False, "No form fields found"

        decisions, learned = autofill([f.descriptor for f in fields], config, answer_provider)
        filled = 0
        for field, decision in zip(fields, decisions):
            if decision.fillable and await fill_field(page, field, decision.value):
                filled += 1
        msg = f"Filled {filled}/{len(fields)} field(s), learned {learned}"
        log.info("  %s %s", "✓" if filled else "✗", msg)
        return filled > 0, msg
    finally:
        await page.close()
