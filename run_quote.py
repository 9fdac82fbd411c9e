#!/usr/bin/env python3
"""
run_quote.py - Fee Quote and Rate-Table Import Runner

Two commands:
1. quote  - price one product for one insured, optionally writing an
            Excel illustration
2. import - read a rate sheet, print the suggested calculation config and
            optionally attach the table to a product JSON document

Usage:
    python run_quote.py quote --type HEALTH_CARE --age 30 --gender Nam \\
        --plan "Nâng cao" --package "Chuẩn"

    python run_quote.py quote --product product.json --age 22 --gender Nữ \\
        --sum-assured 500000000 --report illustration.xlsx

    python run_quote.py import rates.xlsx --product product.json \\
        --output product_with_rates.json

Author: Actuarial Pipeline Project
Version: 1.0.0
"""

import argparse
import json
import sys
import logging
from pathlib import Path
from typing import Optional

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def load_product(path: Optional[str]):
    """Read a product document (camelCase or snake_case keys)."""
    from premium_engine import Product

    if path is None:
        return None
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Product file not found: {path}")
    with open(path, encoding='utf-8') as f:
        return Product.model_validate(json.load(f))


def run_quote(args: argparse.Namespace) -> int:
    from premium_engine import (
        CalculatorParams,
        ContractProduct,
        IllustrationBuilder,
        create_calculator,
        generate_illustration_report,
        load_settings,
    )

    settings = load_settings(args.settings)
    calculator = create_calculator(settings)
    product = load_product(args.product)

    if product is None and not args.type:
        print("ERROR: Give --product or --type")
        return 1

    params = CalculatorParams(
        calculation_type=args.type,
        sum_assured=args.sum_assured,
        age=args.age,
        gender=args.gender,
        product=product,
        product_code=args.code,
        term=args.term,
        occupation_group=args.occupation_group,
        plan=args.plan,
        package=args.package,
    )
    result = calculator.quote(params)

    print("=" * 60)
    print("FEE QUOTE")
    print("=" * 60)
    if product is not None:
        print(f"Product:     {product.name or product.code}")
    print(f"Type:        {params.calculation_type}")
    print(f"Insured:     age {params.age}, {params.gender.value}")
    print(f"Sum assured: {params.sum_assured:,.0f}")
    print(f"Source:      {result.source}")
    print(f"Status:      {result.status.value}")
    if result.rate is not None:
        print(f"Rate:        {result.rate}")
    print(f"Fee:         {result.amount:,.0f}")
    if result.reason:
        print(f"Reason:      {result.reason}")

    if args.report:
        if product is None:
            print("ERROR: --report needs --product")
            return 1
        line = ContractProduct(
            product_id=product.id,
            product_name=product.name,
            sum_assured=params.sum_assured,
            attributes={
                'payment_term': params.term,
                'occupation_group': params.occupation_group,
                'plan': params.plan,
                'package': params.package,
            },
        )
        builder = IllustrationBuilder([product], calculator)
        illustration = builder.build(args.customer, params.age, params.gender, line)
        path = generate_illustration_report(illustration, args.report)
        print(f"Report:      {path}")

    return 0 if result.found else 2


def run_import(args: argparse.Namespace) -> int:
    from premium_engine import apply_rate_table, load_rate_table

    imported = load_rate_table(args.file, sheet_name=args.sheet)
    summary = imported.get_summary()

    print("=" * 60)
    print("RATE TABLE IMPORT")
    print("=" * 60)
    print(json.dumps(summary, ensure_ascii=False, indent=2))

    if args.product:
        product = load_product(args.product)
        product = apply_rate_table(product, imported)
        output = Path(args.output or args.product)
        with open(output, 'w', encoding='utf-8') as f:
            json.dump(product.model_dump(mode='json', by_alias=True), f,
                      ensure_ascii=False, indent=2)
        print(f"Product written to: {output}")

    return 0


def main():
    parser = argparse.ArgumentParser(
        description='Price insurance products and import rate tables',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Legacy health-care fee
  python run_quote.py quote --type HEALTH_CARE --age 6 --plan "Cơ bản"

  # Accident rider
  python run_quote.py quote --type RATE_PER_1000_OCCUPATION \\
      --sum-assured 1000000000 --occupation-group 3

  # Import a rate sheet onto a product
  python run_quote.py import rates.xlsx --product product.json
"""
    )
    parser.add_argument('--settings', type=str, help='Calculator settings JSON')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    sub = parser.add_subparsers(dest='command')

    quote = sub.add_parser('quote', help='Price one product')
    quote.add_argument('--product', type=str, help='Product document (JSON)')
    quote.add_argument('--type', type=str, help='Calculation type (when no product)')
    quote.add_argument('--code', type=str, help='Product code (when no product)')
    quote.add_argument('--age', type=int, required=True, help='Insured age')
    quote.add_argument('--gender', type=str, default='Nam', help='Nam / Nữ / Khác')
    quote.add_argument('--sum-assured', type=float, default=0.0, help='Sum assured')
    quote.add_argument('--term', type=int, help='Payment term (years)')
    quote.add_argument('--occupation-group', type=int, help='Occupation group (1-4)')
    quote.add_argument('--plan', type=str, help='Plan label')
    quote.add_argument('--package', type=str, help='Package label')
    quote.add_argument('--customer', type=str, default='', help='Customer name for the report')
    quote.add_argument('--report', type=str, help='Write an Excel illustration here')

    imp = sub.add_parser('import', help='Import a rate sheet')
    imp.add_argument('file', type=str, help='Rate sheet (Excel or CSV)')
    imp.add_argument('--sheet', type=str, help='Sheet name (Excel)')
    imp.add_argument('--product', type=str, help='Attach the table to this product JSON')
    imp.add_argument('--output', type=str, help='Output product JSON (default: overwrite)')

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    handlers = {'quote': run_quote, 'import': run_import}
    try:
        code = handlers[args.command](args)
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}")
        sys.exit(1)
    sys.exit(code)


if __name__ == '__main__':
    main()
