from shiftpay.models import FilingStatus, Settings, ShiftStats, StateCode, TaxSettings


def test_default_settings_match_a_fresh_install():
    settings = Settings()

    assert settings.overtime_threshold == 40
    assert settings.overtime_multiplier == 1.5
    assert settings.week_start_day == 0
    assert settings.tax_settings.state_code is StateCode.GA
    assert settings.tax_settings.filing_status is FilingStatus.SINGLE


def test_settings_to_dict_uses_plain_values():
    payload = Settings(tax_settings=TaxSettings(state_code=StateCode.CUSTOM)).to_dict()

    assert payload["tax_settings"]["state_code"] == "CUSTOM"
    assert payload["tax_settings"]["filing_status"] == "single"
    assert Settings.from_dict(payload) == Settings(tax_settings=TaxSettings(state_code=StateCode.CUSTOM))


def test_state_codes_cover_every_jurisdiction():
    assert len(StateCode) == 53


def test_total_withheld_is_gross_minus_net():
    stats = ShiftStats(
        total_hours=40,
        regular_hours=40,
        overtime_hours=0,
        gross_pay=1000.0,
        regular_pay=1000.0,
        overtime_pay=0.0,
        estimated_federal_tax=80.0,
        estimated_state_tax=40.0,
        estimated_fica=76.5,
        net_pay=803.5,
        guarantee_applied=False,
    )

    assert stats.total_withheld == 196.5
