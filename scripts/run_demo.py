# -*- coding: utf-8 -*-
"""
演示脚本
用种子数据跑一遍浏览、预订、结算流程并打印结果
"""

import argparse
import logging
import os
import sys

# 项目根目录
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from zerosaver.config.settings import get_settings  # noqa: E402
from zerosaver.core.exceptions import BaseApplicationError  # noqa: E402
from zerosaver.seed_data import seed_marketplace  # noqa: E402
from zerosaver.services.marketplace_service import MarketplaceService  # noqa: E402


settings = get_settings()


def currency(amount) -> str:
    return "{}{:.2f}".format(settings.currency_symbol, amount)


def print_deals(market, deals):
    """打印商品列表"""
    if not deals:
        print("  No results. Try widening your filters.")
    for d in deals:
        print("  [{id}] {title} | {vendor} | {category} | {km}km | {price} (was {orig}) | qty={qty} | {mins}m left".format(
            id=d.id,
            title=d.title,
            vendor=d.vendor,
            category=d.category,
            km=d.distance_km,
            price=currency(d.price),
            orig=currency(d.original_price),
            qty=d.quantity,
            mins=market.minutes_left(d.id),
        ))


def main():
    p = argparse.ArgumentParser(description="Run the ZeroSaver reservation flow against seeded demo data.")
    p.add_argument("--q", type=str, default="", help="关键词")
    p.add_argument("--category", type=str, default="All")
    p.add_argument("--diet", type=str, default="All")
    p.add_argument("--max-km", type=float, default=settings.default_max_distance_km)
    p.add_argument("--consumer", type=str, default="demo-consumer")
    p.add_argument("--reserve", action="append", default=[], metavar="DEAL_ID[:QTY]",
                   help="预订商品，可重复，例如 --reserve d2:3")
    p.add_argument("--approve", action="append", default=[], metavar="PARTNER_ID", help="先审核通过的商家")
    p.add_argument("--checkout", action="store_true")
    p.add_argument("--log-level", type=str, default=settings.log_level)
    args = p.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(message)s")

    market = seed_marketplace(MarketplaceService(settings))
    for partner_id in args.approve:
        market.partners.approve(partner_id)

    print("=== DEALS ===")
    deals = market.browse(q=args.q, category=args.category, diet=args.diet, max_distance_km=args.max_km)
    print_deals(market, deals)

    try:
        for item in args.reserve:
            deal_id, _, qty = item.partition(":")
            market.reserve(args.consumer, deal_id, int(qty) if qty else None)

        cart = market.cart(args.consumer)
        print("\n=== CART ===")
        for line in cart.lines:
            print("  {} x{} @ {} = {}".format(line.title, line.quantity, currency(line.price), currency(line.line_total)))
        impact = market.cart_impact(args.consumer)
        print("  total: {} | ~{} kg food | ~{} kg CO2e".format(
            currency(cart.total()), impact.food_kg, impact.co2e_kg))

        if args.checkout:
            confirmation = market.checkout(args.consumer)
            print("\n=== CONFIRMED ===")
            print("  token: {} | items: {} | total: {}".format(
                confirmation.token, confirmation.item_count, currency(confirmation.total)))
    except BaseApplicationError as e:
        print("\nERROR [{}]: {}".format(e.error_code, e.message))
        sys.exit(1)

    summary = market.sales_summary()
    print("\n=== ANALYTICS ===")
    print("  orders: {} | items: {} | revenue: {} | food saved: {} kg | CO2e saved: {} kg".format(
        summary.total_orders, summary.items_sold, currency(summary.revenue),
        summary.food_saved_kg, summary.co2e_saved_kg))
    for stats in summary.categories:
        print("  {}: {} orders, {}".format(stats.category, stats.orders, currency(stats.revenue)))

    counts = market.partners.counts()
    print("\n=== PARTNERS ===")
    print("  total: {total} | pending: {pending} | approved: {approved} | rejected: {rejected}".format(**counts))


if __name__ == "__main__":
    main()
