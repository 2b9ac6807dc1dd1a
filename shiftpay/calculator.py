from __future__ import annotations

from typing import Iterable, List, Optional

from .logging import get_logger
from .models import Settings, Shift, ShiftStats, TaxSettings
from .shifts import shift_hours
from .tax_tables import StateTaxCategory, TaxBracket, TaxTable, load_tax_table

logger = get_logger(__name__)


def progressive_tax(taxable: float, brackets: List[TaxBracket]) -> float:
    """Marginal tax: each slice of income is taxed only at its own bracket's rate."""

    if taxable <= 0:
        return 0.0
    tax = 0.0
    previous_limit = 0.0
    for bracket in brackets:
        if taxable > previous_limit:
            tax += (min(taxable, bracket.up_to) - previous_limit) * bracket.rate
        previous_limit = bracket.up_to
        if taxable <= previous_limit:
            break
    return tax


class WeeklyStatsCalculator:
    def __init__(self, tax_table: TaxTable):
        self.tax_table = tax_table

    def _deduction(self, standard: float, tax_settings: TaxSettings) -> float:
        return standard if tax_settings.use_standard_deduction else tax_settings.custom_deduction

    def federal_tax(self, gross_pay: float, tax_settings: TaxSettings) -> float:
        weeks = self.tax_table.weeks_per_year
        status = tax_settings.filing_status
        deduction = self._deduction(self.tax_table.federal_deduction(status), tax_settings)
        taxable = max(0.0, gross_pay * weeks - deduction)
        return progressive_tax(taxable, self.tax_table.federal_brackets(status)) / weeks

    def state_tax(self, gross_pay: float, tax_settings: TaxSettings) -> float:
        weeks = self.tax_table.weeks_per_year
        annual_gross = gross_pay * weeks
        state_code = tax_settings.state_code
        category = self.tax_table.category_for(state_code)

        if category is StateTaxCategory.NO_TAX:
            return 0.0
        if category is StateTaxCategory.CUSTOM:
            return gross_pay * (tax_settings.state_tax_rate / 100)
        if category is StateTaxCategory.BRACKETED:
            table = self.tax_table.state_table(state_code)
            status = tax_settings.filing_status
            deduction = self._deduction(table.deduction_for(status), tax_settings)
            taxable = max(0.0, annual_gross - deduction)
            return progressive_tax(taxable, table.brackets_for(status)) / weeks
        if category is StateTaxCategory.FLAT:
            return annual_gross * self.tax_table.flat_rate(state_code) / weeks
        if category is StateTaxCategory.FALLBACK:
            logger.debug("state_tax_fallback", state=state_code.value, rate=self.tax_table.fallback_rate)
            return annual_gross * self.tax_table.fallback_rate / weeks
        raise ValueError(f"Unhandled state tax category {category}")

    def calculate(self, shifts: Iterable[Shift], settings: Settings) -> ShiftStats:
        shifts = list(shifts)
        total_hours = sum((shift_hours(shift) for shift in shifts), 0.0)
        regular_hours = min(total_hours, settings.overtime_threshold)
        overtime_hours = max(0.0, total_hours - settings.overtime_threshold)

        regular_pay = regular_hours * settings.hourly_rate
        overtime_pay = overtime_hours * settings.hourly_rate * settings.overtime_multiplier
        gross_pay = regular_pay + overtime_pay

        # No guaranteed pay for a week with nothing logged.
        guarantee_applied = False
        if gross_pay < settings.min_weekly_guarantee and shifts:
            gross_pay = settings.min_weekly_guarantee
            guarantee_applied = True

        tax_settings = settings.tax_settings
        if tax_settings.is_1099:
            federal = state = fica = 0.0
            net_pay = gross_pay
        else:
            federal = self.federal_tax(gross_pay, tax_settings)
            state = self.state_tax(gross_pay, tax_settings)
            fica = gross_pay * self.tax_table.fica_rate if tax_settings.include_fica else 0.0
            additional = tax_settings.additional_withholding or 0.0
            net_pay = gross_pay - (federal + state + fica + additional)

        return ShiftStats(
            total_hours=total_hours,
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
            gross_pay=gross_pay,
            regular_pay=regular_pay,
            overtime_pay=overtime_pay,
            estimated_federal_tax=federal,
            estimated_state_tax=state,
            estimated_fica=fica,
            net_pay=net_pay,
            guarantee_applied=guarantee_applied,
        )


def calculate_weekly_stats(
    shifts: Iterable[Shift], settings: Settings, tax_table: Optional[TaxTable] = None
) -> ShiftStats:
    return WeeklyStatsCalculator(tax_table or load_tax_table()).calculate(shifts, settings)
