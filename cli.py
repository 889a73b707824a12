import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import click

from config.constants import ProcessingFeeMode
from config.settings import DEFAULT_MIN_BOOKABLE_AMOUNT, DEFAULT_DURATION_WEEKS, EXCEL_FILE, LOG_LEVEL
from core.booking import BookingContext, build_loan_record
from core.calculator import calc_effective_rate
from core.comparison import compare_tiers
from core.engine import compute_quote
from core.exceptions import LoanBookError
from core.schedule_generator import schedule_to_frame
from data_manager.data_validator import (
    validate_catalog_ranges, validate_loan_product, validate_product_type,
)
from data_manager.excel_handler import (
    get_all_products, save_product, delete_product,
    get_all_product_types, get_product_types, save_product_type,
    get_customer_loans, save_customer_loan, save_loan, get_booked_loans,
    get_all_config, get_config_float, set_config, load_catalog,
)
from data_manager.schema import PricingRequest
from utils.formatters import fmt_amount, fmt_rate, fmt_weeks
from utils.id_generator import generate_product_id, generate_type_id
from utils.log import configure_logging
from utils.money import to_decimal

logger = logging.getLogger(__name__)


def _parse_date(value):
    return datetime.strptime(value, '%Y-%m-%d').date() if value else None


def _quote(ctx, amount, approved_limit, customer_id, weeks, type_id, start_date):
    data_file = ctx.obj['data_file']
    prior_loans = get_customer_loans(customer_id, data_file) if customer_id else []
    min_amount = get_config_float('min_bookable_amount', DEFAULT_MIN_BOOKABLE_AMOUNT, data_file)
    if weeks is None:
        weeks = int(get_config_float('default_duration_weeks', DEFAULT_DURATION_WEEKS, data_file))
    request = PricingRequest(
        principal=amount,
        approved_limit=to_decimal(approved_limit),
        prior_loans=tuple(prior_loans),
        selected_type_id=type_id,
        duration_weeks=weeks,
    )
    return compute_quote(request, load_catalog(data_file), _parse_date(start_date),
                         Decimal(str(min_amount)))


def _quote_options(f):
    options = [
        click.option('--amount', type=str, required=True, help='Requested principal'),
        click.option('--approved-limit', type=float, required=True, help='Approved credit limit'),
        click.option('--customer-id', type=str, help='Customer whose loan history decides new/repeat'),
        click.option('--weeks', type=int, help='Duration to hold, defaults to the default_duration_weeks config'),
        click.option('--type-id', type=str, help='Product type to price with'),
        click.option('--start-date', type=str, help='Booking date (YYYY-MM-DD), defaults to today'),
    ]
    for option in reversed(options):
        f = option(f)
    return f


@click.group()
@click.option('--data-file', type=click.Path(dir_okay=False, path_type=Path), default=EXCEL_FILE,
              show_default=True, help='Loan book workbook')
@click.option('--log-level', type=str, default=None, help='Logging level')
@click.pass_context
def cli(ctx, data_file, log_level):
    """Loan booking: pricing, schedules and the product catalog."""
    configure_logging(log_level or LOG_LEVEL)
    ctx.ensure_object(dict)
    ctx.obj['data_file'] = data_file


@cli.command()
@_quote_options
@click.pass_context
def quote(ctx, amount, approved_limit, customer_id, weeks, type_id, start_date):
    """Prices a loan amount and reports whether it can be booked."""
    q = _quote(ctx, amount, approved_limit, customer_id, weeks, type_id, start_date)
    if q is None:
        click.echo("No amount entered.")
        return
    r = q.result
    if r.is_priced:
        click.echo(f"Product: {r.product_name} ({r.product_range})")
        click.echo(f"Product type: {r.type_name} [{r.type_id}]")
        click.echo(f"Customer: {r.customer_class.label}")
        click.echo(f"Principal: {fmt_amount(r.principal)}")
        click.echo(f"Interest rate: {fmt_rate(r.interest_rate)}")
        click.echo(f"Total interest: {fmt_amount(r.total_interest)}")
        click.echo(f"Processing fee: {fmt_amount(r.processing_fee)}")
        click.echo(f"Registration fee: {fmt_amount(r.registration_fee)}")
        click.echo(f"Total payable: {fmt_amount(r.total_payable)}")
        click.echo(f"Weekly installment: {fmt_amount(r.weekly_installment)} x {fmt_weeks(r.duration_weeks)}")
        click.echo(f"Effective annual rate: {calc_effective_rate(r, q.schedule):.2f}%")
    for message in q.messages():
        click.echo(f"Error: {message}")
    click.echo("Ready to book" if q.is_bookable else "Not bookable")


@cli.command('schedule')
@_quote_options
@click.pass_context
def schedule_command(ctx, amount, approved_limit, customer_id, weeks, type_id, start_date):
    """Generates the weekly repayment schedule and outputs it as CSV."""
    q = _quote(ctx, amount, approved_limit, customer_id, weeks, type_id, start_date)
    if q is None or not q.schedule:
        reasons = q.messages() if q is not None else ["No amount entered."]
        raise click.ClickException("; ".join(reasons) or "Amount could not be priced")
    click.echo(schedule_to_frame(q.schedule).to_csv(index=False))


@cli.command('compare-tiers')
@click.option('--amount', type=float, required=True, help='Requested principal')
@click.option('--customer-id', type=str, help='Customer whose loan history decides new/repeat')
@click.pass_context
def compare_tiers_command(ctx, amount, customer_id):
    """Prices every product type of the product matching the amount."""
    data_file = ctx.obj['data_file']
    prior_loans = get_customer_loans(customer_id, data_file) if customer_id else []
    comp_df = compare_tiers(to_decimal(amount), load_catalog(data_file), prior_loans)
    if comp_df.empty:
        click.echo("No product type matches this amount.")
        return
    click.echo(comp_df.to_string(index=False))


@cli.command('book-loan')
@_quote_options
@click.option('--booked-by', type=str, help='Officer booking the loan')
@click.option('--branch-id', type=str, help='Branch')
@click.option('--region-id', type=str, help='Region')
@click.option('--tenant-id', type=str, help='Tenant')
@click.pass_context
def book_loan(ctx, amount, approved_limit, customer_id, weeks, type_id, start_date,
              booked_by, branch_id, region_id, tenant_id):
    """Books a loan for a customer when the quote has no errors."""
    if not customer_id:
        raise click.UsageError("--customer-id is required to book a loan")
    q = _quote(ctx, amount, approved_limit, customer_id, weeks, type_id, start_date)
    context = BookingContext(customer_id=customer_id, booked_by=booked_by,
                             branch_id=branch_id, region_id=region_id, tenant_id=tenant_id)
    try:
        record = build_loan_record(q, approved_limit, context)
    except LoanBookError as e:
        raise click.ClickException(str(e))
    save_loan(record, ctx.obj['data_file'])
    click.echo(f"Loan '{record['loan_id']}' booked: {fmt_amount(record['total_payable'])} "
               f"over {fmt_weeks(record['duration_weeks'])}.")


@cli.command('list-loans')
@click.pass_context
def list_loans(ctx):
    """Lists booked loans."""
    click.echo(get_booked_loans(ctx.obj['data_file']).to_string())


@cli.command('add-customer-loan')
@click.option('--customer-id', type=str, required=True, help='Customer ID')
@click.option('--loan-id', type=str, required=True, help='Loan ID')
@click.option('--status', type=str, required=True, help='Loan status, e.g. disbursed')
@click.pass_context
def add_customer_loan(ctx, customer_id, loan_id, status):
    """Records a prior loan in a customer's history."""
    save_customer_loan({'loan_id': loan_id, 'customer_id': customer_id, 'status': status},
                       ctx.obj['data_file'])
    click.echo(f"Loan '{loan_id}' recorded for customer '{customer_id}'.")


@cli.command('list-products')
@click.pass_context
def list_products(ctx):
    """Lists all loan products."""
    click.echo(get_all_products(ctx.obj['data_file']).to_string())


@cli.command('add-product')
@click.option('--product-id', type=str, help='Product ID, generated when omitted')
@click.option('--product-name', type=str, required=True, help='Product name')
@click.option('--product-code', type=str, default='', help='Internal product code')
@click.option('--min-amount', type=float, required=True, help='Smallest amount (inclusive)')
@click.option('--max-amount', type=float, help='Largest amount (inclusive); omit for no upper bound')
@click.option('--registration-fee', type=float, help='Registration fee for new customers')
@click.pass_context
def add_product(ctx, product_id, product_name, product_code, min_amount, max_amount, registration_fee):
    """Adds or updates a loan product."""
    ok, msg = validate_loan_product(product_name, min_amount, max_amount, registration_fee)
    if not ok:
        raise click.ClickException(msg)
    data_file = ctx.obj['data_file']
    product_id = product_id or generate_product_id()
    save_product({
        'product_id': product_id,
        'product_name': product_name,
        'product_code': product_code,
        'min_amount': min_amount,
        'max_amount': max_amount,
        'registration_fee': registration_fee,
    }, data_file)
    click.echo(f"Loan product '{product_id}' saved.")
    ok, msg = validate_catalog_ranges(load_catalog(data_file).products)
    if not ok:
        logger.warning("catalog ranges inconsistent: %s", msg)
        click.echo(f"Warning: {msg}")


@cli.command('delete-product')
@click.option('--product-id', type=str, required=True, help='Product ID')
@click.pass_context
def delete_product_command(ctx, product_id):
    """Deletes a loan product and its product types."""
    try:
        delete_product(product_id, ctx.obj['data_file'])
    except LoanBookError as e:
        raise click.ClickException(str(e))
    click.echo(f"Loan product '{product_id}' deleted.")


@cli.command('list-types')
@click.option('--product-id', type=str, help='Only types of this product')
@click.pass_context
def list_types(ctx, product_id):
    """Lists product types."""
    data_file = ctx.obj['data_file']
    types = get_product_types(product_id, data_file) if product_id else get_all_product_types(data_file)
    click.echo(types.to_string())


@cli.command('add-type')
@click.option('--type-id', type=str, help='Product type ID, generated when omitted')
@click.option('--product-id', type=str, required=True, help='Owning product')
@click.option('--product-type', type=str, required=True, help='Name, e.g. "Inuka 5 Weeks"')
@click.option('--duration-weeks', type=int, required=True, help='Duration in weeks')
@click.option('--interest-rate', type=float, required=True, help='Flat interest (%) over the duration')
@click.option('--processing-fee-rate', type=float, default=0.0, help='Processing fee rate or amount')
@click.option('--processing-fee-mode', type=click.Choice([m.value for m in ProcessingFeeMode]),
              default=ProcessingFeeMode.FLAT.value, help='How the processing fee rate applies')
@click.option('--registration-fee', type=float, default=0.0, help='Fallback registration fee')
@click.option('--penalty-rate', type=float, default=0.0, help='Penalty rate (stored only)')
@click.pass_context
def add_type(ctx, type_id, product_id, product_type, duration_weeks, interest_rate,
             processing_fee_rate, processing_fee_mode, registration_fee, penalty_rate):
    """Adds or updates a product type."""
    ok, msg = validate_product_type(product_type, duration_weeks, interest_rate,
                                    processing_fee_rate, processing_fee_mode, registration_fee)
    if not ok:
        raise click.ClickException(msg)
    type_id = type_id or generate_type_id()
    try:
        save_product_type({
            'type_id': type_id,
            'product_id': product_id,
            'product_type': product_type,
            'duration_weeks': duration_weeks,
            'interest_rate': interest_rate,
            'processing_fee_rate': processing_fee_rate,
            'processing_fee_mode': processing_fee_mode,
            'registration_fee': registration_fee,
            'penalty_rate': penalty_rate,
        }, ctx.obj['data_file'])
    except LoanBookError as e:
        raise click.ClickException(str(e))
    click.echo(f"Product type '{type_id}' saved.")


@cli.command('list-configs')
@click.pass_context
def list_configs(ctx):
    """Lists all system configurations."""
    click.echo(get_all_config(ctx.obj['data_file']).to_string())


@cli.command('set-config')
@click.option('--key', type=str, required=True, help='Config key')
@click.option('--value', type=str, required=True, help='Config value')
@click.option('--description', type=str, default='', help='Description')
@click.pass_context
def set_config_command(ctx, key, value, description):
    """Sets a system configuration."""
    set_config(key, value, description, ctx.obj['data_file'])
    click.echo(f"Config with key '{key}' set successfully.")


if __name__ == "__main__":
    cli()
