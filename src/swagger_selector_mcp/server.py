"""Entry point of the Swagger Selector MCP server."""

import argparse
import logging

from swagger_selector_mcp import __version__
from swagger_selector_mcp import config
from swagger_selector_mcp.mcp import SwaggerSelectorMCP


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser with one subcommand per transport."""
    parser = argparse.ArgumentParser(prog="swagger-selector-mcp", description="Run Swagger Selector MCP server.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--export-dir",
        type=str,
        default=config.EXPORT_DIR,
        help="Directory to write exported files to (default: $SWAGGER_SELECTOR_EXPORT_DIR, unset = return only)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # ==== Start of Transport Mode Subparsers ====
    subparsers = parser.add_subparsers(dest="transport", help="Transport mode")

    # stdio subcommand (default)
    subparsers.add_parser("stdio", help="Use stdio transport (default)")

    # sse subcommand
    sse_parser = subparsers.add_parser("sse", help="Use SSE transport")
    sse_parser.add_argument("--host", default="127.0.0.1", help="Host for SSE transport (default: 127.0.0.1)")
    sse_parser.add_argument("--port", type=int, default=9000, help="Port for SSE transport (default: 9000)")

    # http subcommand
    http_parser = subparsers.add_parser("http", help="Use HTTP streaming transport")
    http_parser.add_argument("--host", default="127.0.0.1", help="Host for HTTP transport (default: 127.0.0.1)")
    http_parser.add_argument("--port", type=int, default=8000, help="Port for HTTP transport (default: 8000)")
    # ==== End of Transport Mode Subparsers ====
    return parser


def configure_logging(debug: bool) -> logging.Logger:
    """Configure root logging and return the server logger."""
    log_level = logging.DEBUG if debug else logging.INFO
    log_format = "%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(name)s - %(message)s"
    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler()],
    )
    logger = logging.getLogger("SwaggerSelectorServer")
    logger.setLevel(log_level)
    if debug:
        logging.getLogger("SwaggerSelectorMCP").setLevel(logging.DEBUG)
        logging.getLogger("SelectorSession").setLevel(logging.DEBUG)
        logging.getLogger("DocumentClient").setLevel(logging.DEBUG)
        logging.getLogger("OpenAPIPruner").setLevel(logging.DEBUG)
        logger.info("Debug mode enabled")
    return logger


def create_server(export_dir: str | None = None) -> SwaggerSelectorMCP:
    """Create the MCP server with all tools registered."""
    mcp_server = SwaggerSelectorMCP(export_dir=export_dir, proxy_url=config.PROXY_URL)
    mcp_server.register_tools()
    return mcp_server


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the Swagger Selector MCP server."""
    args = build_parser().parse_args(argv)

    # Default to stdio if no subcommand is provided
    if args.transport is None:
        args.transport = "stdio"

    logger = configure_logging(args.debug)
    logger.info("Starting Swagger Selector MCP %s (%s)", __version__, args.transport)
    if args.export_dir:
        logger.info("Exports are written to %s", args.export_dir)
    if config.PROXY_URL:
        logger.info(">>> Using proxy URL: %s", config.PROXY_URL)

    mcp_server = create_server(export_dir=args.export_dir)

    if args.transport == "sse":
        mcp_server.run(transport="sse", host=args.host, port=args.port)
    elif args.transport == "http":
        mcp_server.run(
            transport="http",
            host=args.host,
            port=args.port,
            log_level="DEBUG" if args.debug else "WARNING",
        )
    else:
        mcp_server.run()


if __name__ == "__main__":
    main()
