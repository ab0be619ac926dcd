#!/usr/bin/env python3
"""
Script Extraction Service - Main Runner

Uploads PDF scripts to AskYourPDF and saves the plain text returned by its
knowledge-base chat endpoint.

Usage:
    python extract_script.py <pdf_path> [options]

Examples:
    # Extract a single script
    python extract_script.py screenplay.pdf

    # Save results to a specific file
    python extract_script.py screenplay.pdf --output screenplay.json

    # Fetch text for a document that was already uploaded
    python extract_script.py screenplay.pdf --doc-id abc123

    # Process every PDF in a directory
    python extract_script.py scripts/ --batch
"""

import argparse
import sys
import json
from pathlib import Path
from typing import Any, Dict, List
from datetime import datetime

from script_extraction_service import (
    ClientSettings,
    ConfigurationError,
    DocumentExtractionClient,
    ExtractionResult,
    ExtractionServiceError
)
from script_extraction_service.utils import configure_logging


def find_pdf_files(directory: Path) -> List[Path]:
    """Find all PDF files in the specified directory, sorted by name."""
    return sorted((p for p in directory.glob("*.pdf") if p.is_file()), key=lambda p: p.name)


def resolve_output_path(output: str, default_name: str) -> Path:
    """Place relative output paths under output/ unless they already are."""
    if not output:
        return Path("output") / default_name
    output_file = Path(output)
    if not output_file.is_absolute() and output_file.parent.name != 'output':
        return Path("output") / output_file
    return output_file


def save_json(data: Dict[str, Any], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def build_client(args) -> DocumentExtractionClient:
    settings = ClientSettings.from_env(api_key=args.api_key, timeout=args.timeout)
    return DocumentExtractionClient(settings)


def extract_file(client: DocumentExtractionClient, pdf_path: Path, doc_id: str = None) -> ExtractionResult:
    """Upload one PDF (unless doc_id is given) and fetch its text."""
    if doc_id:
        text = client.fetch_extracted_text(doc_id)
        return ExtractionResult(doc_id=doc_id, text=text, filename=pdf_path.name)
    return client.extract_text(pdf_path.read_bytes(), filename=pdf_path.name)


def process_batch(directory: Path, args) -> int:
    """Process all PDF files in a directory and combine results into a single JSON file."""
    pdf_files = find_pdf_files(directory)
    if not pdf_files:
        print(f"❌ Error: No PDF files found in directory: {directory}")
        return 1

    print(f"📁 Found {len(pdf_files)} PDF files in {directory}")

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    output_path = resolve_output_path(args.output, f"batch_scripts_{timestamp}.json")
    print(f"📄 Output file: {output_path}")

    combined_results = {
        "extraction_metadata": {
            "timestamp": datetime.now().isoformat(),
            "total_documents": len(pdf_files),
            "directory": str(directory.absolute())
        },
        "documents": []
    }
    successful = 0
    failed = 0

    with build_client(args) as client:
        for i, pdf_file in enumerate(pdf_files, 1):
            print(f"\n🔍 Processing {i}/{len(pdf_files)}: {pdf_file.name}")
            entry = {
                "file_info": {
                    "filename": pdf_file.name,
                    "file_size_bytes": pdf_file.stat().st_size,
                    "extraction_timestamp": datetime.now().isoformat()
                }
            }
            try:
                result = extract_file(client, pdf_file)
                entry["extraction_result"] = result.model_dump()
                successful += 1
                print(f"✅ Completed: {pdf_file.name}")
            except ConfigurationError:
                raise
            except (ExtractionServiceError, ValueError) as e:
                entry["extraction_result"] = None
                entry["error"] = str(e)
                failed += 1
                print(f"❌ Failed: {pdf_file.name} - {e}")
            combined_results["documents"].append(entry)

    combined_results["extraction_metadata"]["successful_extractions"] = successful
    combined_results["extraction_metadata"]["failed_extractions"] = failed
    save_json(combined_results, output_path)

    print(f"\n✅ Batch processing complete!")
    print(f"📊 Results: {successful} successful, {failed} failed")
    print(f"📄 Combined results saved to: {output_path}")
    return 0 if failed == 0 else 1


def process_single(pdf_path: Path, args) -> int:
    output_path = resolve_output_path(args.output, f"{pdf_path.stem}_script.json")

    print(f"🔍 Extracting: {pdf_path.name}")
    with build_client(args) as client:
        result = extract_file(client, pdf_path, doc_id=args.doc_id)

    data = result.model_dump()
    data["extraction_timestamp"] = datetime.now().isoformat()
    save_json(data, output_path)

    print(f"✅ Extraction complete! (docId: {result.doc_id})")
    print(f"📄 Results saved to: {output_path}")
    if args.verbose:
        lines = result.text.splitlines()
        print(f"\n📊 {len(lines)} lines, {len(result.text)} characters")
        for line in lines[:5]:
            print(f"   {line}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract plain text from PDF scripts using the AskYourPDF API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python extract_script.py screenplay.pdf
  python extract_script.py screenplay.pdf --output screenplay.json
  python extract_script.py screenplay.pdf --doc-id abc123
  python extract_script.py "scripts/" --batch
        """
    )

    parser.add_argument(
        'pdf_path',
        help='Path to the PDF file or directory to process'
    )

    parser.add_argument(
        '--batch', '-b',
        action='store_true',
        help='Process all PDF files in a directory and combine results into single JSON'
    )

    parser.add_argument(
        '--output', '-o',
        help='Output file path for results (JSON format)'
    )

    parser.add_argument(
        '--doc-id',
        help='Skip the upload and fetch text for an already uploaded document'
    )

    parser.add_argument(
        '--api-key',
        help='AskYourPDF API key (or set ASKYOURPDF_API_KEY env var)'
    )

    parser.add_argument(
        '--timeout', '-t',
        type=float,
        help='Per-request timeout in seconds (default: 60)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )
    return parser


def main(argv: List[str] = None) -> int:
    """Main entry point for the script extraction runner."""
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else "WARNING")

    pdf_path = Path(args.pdf_path)
    if not pdf_path.exists():
        print(f"❌ Error: Path not found: {pdf_path}")
        return 1

    try:
        if args.batch:
            if not pdf_path.is_dir():
                print(f"❌ Error: Batch mode requires a directory path: {pdf_path}")
                return 1
            return process_batch(pdf_path, args)

        if not pdf_path.is_file():
            print(f"❌ Error: PDF file not found: {pdf_path}")
            return 1
        return process_single(pdf_path, args)

    except KeyboardInterrupt:
        print(f"\n⏹️  Extraction interrupted by user")
        return 1
    except (ExtractionServiceError, ValueError) as e:
        print(f"❌ Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
