#!/usr/bin/env python3
"""
SPECTRE CLI Application

Command-line interface for the movie description analysis pipeline.
"""

import argparse
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from spectre import get_logger, get_config
from spectre.core.errors import SpectreError

logger = get_logger(__name__)


def build_pipeline(args):
    """Create the pipeline from CLI arguments."""
    from spectre.analysis import AnalysisPipeline, PipelineConfig, ZeroVectorPolicy
    from spectre.embeddings import create_provider, get_model_dimension

    config = get_config()

    pipeline_config = PipelineConfig.from_config()
    # Unknown models adopt the width of the first returned vector
    pipeline_config.expected_dimension = get_model_dimension(args.model)
    pipeline_config.top_k = args.top_k
    pipeline_config.n_components = args.components
    pipeline_config.zero_vector_policy = ZeroVectorPolicy(args.zero_vectors)
    pipeline_config.random_state = args.seed
    pipeline_config.dataset.sample_size = args.sample_size
    pipeline_config.dataset.random_seed = args.seed

    provider = create_provider(
        args.model,
        api_key=config.get_api_key(args.api_key),
        timeout=config.REQUEST_TIMEOUT
    )
    return AnalysisPipeline(provider, pipeline_config)


def run_analysis(args):
    """Run the full pipeline and write artifacts."""
    from spectre.analysis import save_artifacts

    print(f"🎬 Analyzing {args.sample_size} descriptions from {args.dataset}")

    result = build_pipeline(args).run(args.dataset)
    paths = save_artifacts(result, args.output_dir)

    ratios = result.projection.explained_variance_ratio
    print(f"✅ Embedded {result.record_count} records in {result.processing_time:.2f}s")
    print(f"   Explained variance: {', '.join(f'{r:.3f}' for r in ratios)}")
    for name, path in paths.items():
        print(f"   {name}: {path}")
    return result


def show_neighbors(args):
    """Run the pipeline and print neighbors of one record."""
    result = build_pipeline(args).run(args.dataset)
    query = result.matrix.records[result.matrix.index_of(args.record_id)]

    print(f"🔍 Nearest to [{query.id}] {query.title}")
    for neighbor in result.similarity.nearest_records(args.record_id, args.top_k):
        print(f"   {neighbor.rank}. [{neighbor.score:.3f}] {neighbor.title} ({neighbor.record_id})")
    return result


def add_common_arguments(parser, config):
    parser.add_argument("--dataset", default=config.DATASET_PATH,
                        help="CSV path or URL")
    parser.add_argument("--sample-size", type=int, default=config.SAMPLE_SIZE,
                        help="Number of records to sample")
    parser.add_argument("--seed", type=int, default=config.RANDOM_SEED,
                        help="Random seed for sampling and decomposition")
    parser.add_argument("--model", default=config.EMBEDDING_MODEL,
                        help="Embedding model")
    parser.add_argument("--api-key", default=None,
                        help="Provider API key (defaults to OPENAI_API_KEY)")
    parser.add_argument("--components", type=int, default=config.N_COMPONENTS,
                        help="Principal components to keep")
    parser.add_argument("--top-k", type=int, default=config.TOP_K,
                        help="Neighbors per record")
    parser.add_argument("--zero-vectors", choices=["raise", "zero"],
                        default=config.ZERO_VECTOR_POLICY,
                        help="Handling of zero-norm embeddings")


def main(argv=None):
    """Main CLI entry point."""
    config = get_config()

    parser = argparse.ArgumentParser(description="SPECTRE - Semantic Projection & Embedding Comparison for Text REcords")
    parser.add_argument("--version", action="version", version="SPECTRE 0.1.0")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Embed, rank and project the dataset")
    add_common_arguments(run_parser, config)
    run_parser.add_argument("--output-dir", default=config.OUTPUT_DIR,
                            help="Directory for CSV artifacts")

    # Neighbors command
    neighbors_parser = subparsers.add_parser("neighbors", help="Show nearest neighbors of one record")
    add_common_arguments(neighbors_parser, config)
    neighbors_parser.add_argument("record_id", help="Identifier of the query record")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        if args.command == "run":
            run_analysis(args)
        elif args.command == "neighbors":
            show_neighbors(args)
    except KeyboardInterrupt:
        print("\n❌ Interrupted by user")
        return 130
    except SpectreError as e:
        logger.error(f"Command failed: {e}")
        print(f"❌ Error: {e}")
        return 1
    except ImportError as e:
        logger.error(f"Missing optional dependency: {e}")
        print(f"❌ Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
