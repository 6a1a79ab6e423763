"""
Tariff tables for the car finance calculator.
Road tax by power and age, CO2 surcharge and registration fee schedules.
All amounts in EUR.
"""
from __future__ import annotations
from typing import Tuple

from .models import TaxBracket, Co2Bracket, RegistrationBracket

INF = float("inf")

VAT_RATE = 0.21

# =============================================================================
# ROAD TAX (kW x age)
# =============================================================================
# rates[i] = yearly tax for a car of i years, rates[15] = 15 years and older

_FLOOR = 61.50

TAX_BRACKETS: Tuple[TaxBracket, ...] = (
    TaxBracket(max_kw=70, rates=(_FLOOR,) * 16),
    TaxBracket(
        min_kw=71, max_kw=85,
        rates=(123.00, 110.70, 98.40, 86.10, 73.80, 67.65) + (_FLOOR,) * 10,
    ),
    TaxBracket(
        min_kw=86, max_kw=100,
        rates=(495.00, 445.50, 396.00, 346.50, 297.00, 272.25, 247.50, 222.75,
               198.00, 173.25, 148.50, 123.75, 99.00, 74.25, 61.50, 61.50),
    ),
    TaxBracket(
        min_kw=101, max_kw=110,
        rates=(867.00, 780.30, 693.60, 606.90, 520.20, 476.85, 433.50, 390.15,
               346.80, 303.45, 260.10, 216.75, 173.40, 130.05, 86.70, 61.50),
    ),
    TaxBracket(
        min_kw=111, max_kw=120,
        rates=(1239.00, 1115.10, 991.20, 867.30, 743.40, 681.45, 619.50, 557.55,
               495.60, 433.65, 371.70, 309.75, 247.80, 185.85, 123.90, 61.50),
    ),
    TaxBracket(
        min_kw=121, max_kw=155,
        rates=(2478.00, 2230.20, 1982.40, 1734.60, 1486.80, 1362.90, 1239.00, 1115.10,
               991.20, 867.30, 743.40, 619.50, 495.60, 371.70, 247.80, 61.50),
    ),
    TaxBracket(
        min_kw=156, max_kw=INF,
        rates=(4957.00, 4461.30, 3965.60, 3469.90, 2974.20, 2726.35, 2478.50, 2230.65,
               1982.80, 1734.95, 1487.10, 1239.25, 991.40, 743.55, 495.70, 61.50),
    ),
)

MAX_AGE_INDEX = 15

# =============================================================================
# CO2 SURCHARGE (g/km), flat amount per bracket
# =============================================================================

CO2_THRESHOLD = 146  # below: no surcharge

CO2_BRACKETS: Tuple[Co2Bracket, ...] = (
    Co2Bracket(146, 155, 100),
    Co2Bracket(156, 165, 175),
    Co2Bracket(166, 175, 250),
    Co2Bracket(176, 185, 375),
    Co2Bracket(186, 195, 500),
    Co2Bracket(196, 205, 600),
    Co2Bracket(206, 215, 700),
    Co2Bracket(216, 225, 1000),
    Co2Bracket(226, 235, 1200),
    Co2Bracket(236, 245, 1500),
    Co2Bracket(246, 255, 2000),
    Co2Bracket(256, INF, 2500),
)

# =============================================================================
# REGISTRATION FEE (engine capacity in cc -> fiscal hp "CV" -> fee)
# =============================================================================

REGISTRATION_BRACKETS: Tuple[RegistrationBracket, ...] = (
    RegistrationBracket(max_cc=750, fiscal_hp=4, fee=100.98),
    RegistrationBracket(min_cc=751, max_cc=950, fiscal_hp=5, fee=126.32),
    RegistrationBracket(min_cc=951, max_cc=1150, fiscal_hp=6, fee=182.56),
    RegistrationBracket(min_cc=1151, max_cc=1350, fiscal_hp=7, fee=238.52),
    RegistrationBracket(min_cc=1351, max_cc=1550, fiscal_hp=8, fee=295.02),
    RegistrationBracket(min_cc=1551, max_cc=1750, fiscal_hp=9, fee=351.52),
    RegistrationBracket(min_cc=1751, max_cc=1950, fiscal_hp=10, fee=407.22),
    RegistrationBracket(min_cc=1951, max_cc=2150, fiscal_hp=11, fee=528.40),
    RegistrationBracket(min_cc=2151, max_cc=2350, fiscal_hp=12, fee=649.70),
    RegistrationBracket(min_cc=2351, max_cc=2550, fiscal_hp=13, fee=770.62),
    RegistrationBracket(min_cc=2551, max_cc=2750, fiscal_hp=14, fee=891.79),
    RegistrationBracket(min_cc=2751, max_cc=3050, fiscal_hp=15, fee=1013.10),
    RegistrationBracket(min_cc=3051, max_cc=3250, fiscal_hp=16, fee=1326.86),
    RegistrationBracket(min_cc=3251, max_cc=3450, fiscal_hp=17, fee=1640.89),
    RegistrationBracket(min_cc=3451, max_cc=3650, fiscal_hp=18, fee=1954.92),
    RegistrationBracket(min_cc=3651, max_cc=3950, fiscal_hp=19, fee=2268.29),
    RegistrationBracket(min_cc=3951, max_cc=4150, fiscal_hp=20, fee=2582.32),
)

# Beyond the table: one extra CV per started 200 cc, 140.84 EUR each
REGISTRATION_CEILING_CC = REGISTRATION_BRACKETS[-1].max_cc
REGISTRATION_STEP_CC = 200
REGISTRATION_FEE_PER_HP = 140.84
