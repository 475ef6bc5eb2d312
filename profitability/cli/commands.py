"""
CLI 명령어 처리 모듈

서브커맨드:
- calc           수수료 계산
- categories     요율표 카테고리 목록
- check-catalog  요율 파일 검증 및 누락 조합 보고
"""

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from ..core.config import AppConfig
from ..core.exceptions import CatalogLoadError, ConfigurationError, FaultKind
from ..core.logging import setup_logger
from ..domain.catalog import RateCatalog, load_catalog
from ..domain.models import Location, ProductSize, ServiceLevel, ShippingMode
from ..services.calculation_service import CalculationService, ServiceResponse


# 종료 코드
EXIT_OK = 0
EXIT_CLIENT_FAULT = 2
EXIT_CONFIG_FAULT = 3

FAULT_EXIT_CODES = {
    FaultKind.CLIENT: EXIT_CLIENT_FAULT,
    FaultKind.CONFIGURATION: EXIT_CONFIG_FAULT,
    FaultKind.INTERNAL: EXIT_CONFIG_FAULT,
}


@dataclass
class CLIConfig:
    """CLI 설정"""
    verbose: bool = False
    no_color: bool = False
    catalog_path: Optional[Path] = None


class CLI:
    """Profitability Calculator CLI"""

    VERSION = "1.0.0"

    def __init__(self, config: CLIConfig = None, app_config: AppConfig = None, console: Console = None):
        self.config = config or CLIConfig()
        self.app_config = app_config or AppConfig()
        if self.config.catalog_path is not None:
            self.app_config.catalog_path = self.config.catalog_path
        self.console = console or Console(no_color=self.config.no_color, highlight=False)

    @property
    def log_level(self) -> int:
        """--verbose면 DEBUG, 아니면 LOG_LEVEL 설정"""
        return logging.DEBUG if self.config.verbose else self.app_config.logging_level

    def load_catalog(self) -> RateCatalog:
        return load_catalog(
            self.app_config.resolved_catalog_path,
            strict=self.app_config.strict_catalog,
        )

    # ------------------------------------------------------------
    # calc
    # ------------------------------------------------------------

    def calc(self, args: argparse.Namespace) -> int:
        """수수료 계산"""
        try:
            service = CalculationService.from_config(self.app_config)
        except CatalogLoadError as e:
            self.print_error(str(e))
            return EXIT_CONFIG_FAULT

        payload = {
            "productCategory": args.category,
            "productSize": args.size,
            "location": args.location,
            "shippingMode": args.mode,
            "serviceLevel": args.service_level,
            "sellingPrice": args.price,
            "weight": args.weight,
        }
        response = service.handle(payload)

        if args.json:
            self.console.print_json(json.dumps(response.to_dict()))
        elif response.ok:
            self.print_breakdown(response, args.category)
        else:
            self.print_error(f"[{response.error.error_code}] {response.error.message}")

        if response.ok:
            return EXIT_OK
        return FAULT_EXIT_CODES[response.error.kind]

    def print_breakdown(self, response: ServiceResponse, category: str):
        """수수료 내역 표 출력"""
        breakdown = response.data
        currency = response.meta.get("currency", "INR")

        table = Table(title=f"Fee breakdown - {category}")
        table.add_column("Component")
        table.add_column(f"Amount ({currency})", justify="right")

        table.add_row("Referral fee", _money(breakdown.referral_fee))
        table.add_row("Weight handling fee", _money(breakdown.weight_handling_fee))
        table.add_row("Closing fee", _money(breakdown.closing_fee))
        table.add_row("Pick & pack fee", _money(breakdown.pick_and_pack_fee))
        table.add_section()
        table.add_row("[bold]Total fees[/bold]", f"[bold]{_money(breakdown.total_fees)}[/bold]")
        net_style = "red" if breakdown.is_loss else "green"
        table.add_row(
            "[bold]Net earnings[/bold]",
            f"[bold {net_style}]{_money(breakdown.net_earnings)}[/bold {net_style}]",
        )

        self.console.print(table)
        self.console.print(f"catalog {breakdown.catalog_version}", style="dim")

    # ------------------------------------------------------------
    # categories / check-catalog
    # ------------------------------------------------------------

    def categories(self, args: argparse.Namespace) -> int:
        """카테고리 목록"""
        try:
            catalog = self.load_catalog()
        except CatalogLoadError as e:
            self.print_error(str(e))
            return EXIT_CONFIG_FAULT

        for name in catalog.categories:
            rule = catalog.lookup_referral_rule(name)
            kind = "flat" if rule is not None and rule.is_flat else "tiered"
            self.console.print(f"{name}  [dim]({kind})[/dim]")
        return EXIT_OK

    def check_catalog(self, args: argparse.Namespace) -> int:
        """요율 파일 검증"""
        try:
            catalog = load_catalog(args.path, strict=args.strict)
        except CatalogLoadError as e:
            self.print_error(str(e))
            for gap in e.details.get("gaps", []):
                self.console.print(f"  - {gap}")
            return EXIT_CONFIG_FAULT

        gaps = catalog.coverage_gaps()
        self.print_success(
            f"{args.path}: version {catalog.version}, {len(catalog.categories)} categories"
        )
        if gaps:
            self.print_warning(f"{len(gaps)} combination(s) have no rule:")
            for gap in gaps:
                self.console.print(f"  - {gap}")
        return EXIT_OK

    # ------------------------------------------------------------
    # 출력 헬퍼
    # ------------------------------------------------------------

    def print_success(self, message: str):
        self.console.print(f"[green]OK[/green] {message}")

    def print_warning(self, message: str):
        self.console.print(f"[yellow]WARN[/yellow] {message}")

    def print_error(self, message: str):
        self.console.print(f"[red]ERROR[/red] {message}")


def _money(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def create_parser() -> argparse.ArgumentParser:
    """CLI 파서 생성"""
    parser = argparse.ArgumentParser(
        prog="profitability",
        description="Marketplace fee and net earnings calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
예시:
  %(prog)s calc --category Books --size Standard --location Local \\
      --mode "Easy Ship" --service-level Standard --price 500 --weight 0.3
  %(prog)s categories
  %(prog)s check-catalog rates.json --strict
"""
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="상세 로그 출력")
    parser.add_argument("--no-color", action="store_true", help="컬러 출력 비활성화")
    parser.add_argument("--catalog", type=Path, help="요율 파일 경로 (기본: 환경변수 또는 번들 요율표)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {CLI.VERSION}")

    subparsers = parser.add_subparsers(dest="command", help="사용 가능한 명령어")

    # calc 커맨드
    calc_parser = subparsers.add_parser("calc", help="수수료 계산")
    calc_parser.add_argument("--category", required=True, help="상품 카테고리")
    calc_parser.add_argument("--size", default=ProductSize.STANDARD.value,
                             help=f"상품 사이즈 {list(ProductSize.values())}")
    calc_parser.add_argument("--location", default=Location.LOCAL.value,
                             help=f"배송 권역 {list(Location.values())}")
    calc_parser.add_argument("--mode", default=ShippingMode.EASY_SHIP.value,
                             help=f"배송 방식 {list(ShippingMode.values())}")
    calc_parser.add_argument("--service-level", default=ServiceLevel.STANDARD.value,
                             help=f"서비스 등급 {list(ServiceLevel.values())}")
    calc_parser.add_argument("--price", required=True, help="판매가")
    calc_parser.add_argument("--weight", required=True, help="무게 (kg)")
    calc_parser.add_argument("--json", action="store_true", help="응답 계약(JSON)으로 출력")

    # categories 커맨드
    subparsers.add_parser("categories", help="카테고리 목록")

    # check-catalog 커맨드
    check_parser = subparsers.add_parser("check-catalog", help="요율 파일 검증")
    check_parser.add_argument("path", type=Path, help="요율 파일 (JSON)")
    check_parser.add_argument("--strict", action="store_true", help="누락 조합이 있으면 실패")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI 진입점"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    try:
        app_config = AppConfig.from_env()
    except ConfigurationError as e:
        print(f"ERROR {e}", file=sys.stderr)
        return EXIT_CONFIG_FAULT

    cli = CLI(CLIConfig(verbose=args.verbose, no_color=args.no_color, catalog_path=args.catalog), app_config)
    setup_logger("profitability", level=cli.log_level, json_format=app_config.log_json)

    commands = {
        "calc": cli.calc,
        "categories": cli.categories,
        "check-catalog": cli.check_catalog,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
