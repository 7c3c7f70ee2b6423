#!/usr/bin/env python3
"""
Standalone PNCP Search Script - No web server required.

Runs the search pipeline (modalidades -> paginated fetch -> local filter)
with structured filters given on the command line, or with a free-text
question when --question is used (requires OPENAI_API_KEY).

Usage:
    # Cleaning services in SP above R$ 50k, January 2024, all modalidades
    python scripts/run_pncp_search.py --keywords limpeza --uf SP \\
        --valor-min 50000 --data-inicial 2024-01-01 --data-final 2024-01-31

    # Only two modalidades, excluding hospital cleaning
    python scripts/run_pncp_search.py --keywords limpeza --blacklist hospitalar \\
        --modalidades "pregão eletrônico" "dispensa de licitação" \\
        --data-inicial 2024-01-01 --data-final 2024-01-31

    # Free-text question (filters extracted by the LLM)
    python scripts/run_pncp_search.py --question "limpeza urbana em SP acima de 50 mil"
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

# Load environment variables from .env file BEFORE importing backend modules
dotenv_path = Path(__file__).parent.parent / ".env"
if dotenv_path.exists():
    load_dotenv(dotenv_path, override=True)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

from busca_licitacoes.core.config import settings  # noqa: E402
from busca_licitacoes.domains.search import FilterSet  # noqa: E402
from busca_licitacoes.services.extraction import OpenAIFilterExtractor  # noqa: E402
from busca_licitacoes.services.search import PNCPSearchService  # noqa: E402


def build_filters(args: argparse.Namespace) -> FilterSet:
    """Build the filter set from CLI arguments or from a question."""
    if args.question:
        extractor = OpenAIFilterExtractor.from_settings(settings)
        return extractor.extract(args.question)

    return FilterSet(
        palavrasChave=args.keywords,
        sinonimos=[args.synonyms] if args.synonyms else [],
        blacklist=args.blacklist,
        valorMin=args.valor_min,
        valorMax=args.valor_max,
        dataInicial=args.data_inicial,
        dataFinal=args.data_final,
        estado=args.uf,
        modalidades=args.modalidades,
    )


def run_search(filters: FilterSet) -> bool:
    """Run the search pipeline and log a summary. Returns success."""
    service = PNCPSearchService.from_settings(settings)
    try:
        result, report = service.run(filters)
    finally:
        service.close()

    logger.info("=" * 80)
    if not result.success:
        logger.error(f"Busca falhou (status {result.status}): {result.error}")
        logger.info("=" * 80)
        return False

    licitacoes = result.data.data
    logger.info(f"Licitações encontradas: {len(licitacoes)}")

    if report is not None:
        logger.info(f"Registros brutos: {len(report.records)}")
        for nome, count in report.modalidade_stats.items():
            logger.info(f"  {nome}: {count}")
        for failure in report.failures:
            logger.warning(
                f"  Falha na modalidade {failure.modalidade.value} "
                f"(página {failure.pagina}): {failure.error.error}"
            )

    logger.info("=" * 80)
    for licitacao in licitacoes:
        orgao = (licitacao.get("orgaoEntidade") or {}).get("razaoSocial", "-")
        logger.info(
            f"{licitacao.get('numeroControlePNCP', '-')} | {orgao} | "
            f"{licitacao.get('valorTotalEstimado')} | "
            f"{(licitacao.get('objetoCompra') or '')[:100]}"
        )

    return True


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Standalone PNCP Search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument("--question", help="Free-text question (uses the LLM)")
    parser.add_argument("--keywords", nargs="*", default=[], help="Keywords")
    parser.add_argument("--synonyms", nargs="*", default=[], help="Synonym group")
    parser.add_argument("--blacklist", nargs="*", default=[], help="Excluded terms")
    parser.add_argument("--valor-min", type=float, help="Minimum value (inclusive)")
    parser.add_argument("--valor-max", type=float, help="Maximum value (inclusive)")
    parser.add_argument("--data-inicial", help="Start date (YYYY-MM-DD)")
    parser.add_argument("--data-final", help="End date (YYYY-MM-DD)")
    parser.add_argument("--uf", help="State abbreviation (ex: SP)")
    parser.add_argument(
        "--modalidades",
        nargs="*",
        default=[],
        help="Modalidade names (defaults to all 13)",
    )

    args = parser.parse_args()

    try:
        filters = build_filters(args)
        ok = run_search(filters)
        sys.exit(0 if ok else 1)

    except Exception as e:
        logger.error(f"Search error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
