"""FastAPI web server for the optimizer."""
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from .optimizer import SVGOptimizer

ALLOWED_CONTENT_TYPES = {"image/svg+xml", "text/xml", "application/xml", "text/plain", "application/octet-stream"}


async def _read_svg(upload: UploadFile) -> str:
    if upload.content_type and upload.content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(400, f"Unsupported file type: {upload.content_type}")
    content = await upload.read()
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(400, "SVG must be UTF-8 encoded")


def create_app(optimizer: Optional[SVGOptimizer] = None) -> FastAPI:
    engine = optimizer or SVGOptimizer()

    app = FastAPI(
        title="svgslim API",
        description="Shrink SVG files without changing how they look",
        version="0.1.0",
    )

    @app.post("/optimize")
    async def optimize(
        svg: UploadFile = File(...),
        preset: Optional[str] = Form(None),
        aggressiveness: Optional[str] = Form(None),
        precision: Optional[int] = Form(None),
        minify: Optional[bool] = Form(None),
    ):
        """
        Optimize an uploaded SVG and return the result.
        """
        text = await _read_svg(svg)

        # Build explicit options
        options = {}
        if aggressiveness:
            options["aggressiveness"] = aggressiveness
        if precision is not None:
            options["coordinate_precision"] = precision
        if minify is not None:
            options["minify"] = minify

        result = engine.optimize_with_timeout(text, options, preset)
        if not result.success:
            detail = {"error": result.error}
            if result.error_details is not None:
                detail["details"] = result.error_details.to_dict()
            raise HTTPException(422, detail)

        filename = (svg.filename or "optimized.svg").rsplit(".", 1)[0]
        return Response(
            content=result.optimized_svg,
            media_type="image/svg+xml",
            headers={
                "Content-Disposition": f'attachment; filename="{filename}.min.svg"',
                "X-Original-Size": str(result.original_size),
                "X-Optimized-Size": str(result.optimized_size),
                "X-Compression-Ratio": f"{result.compression_ratio:.4f}",
            },
        )

    @app.post("/validate")
    async def validate(svg: UploadFile = File(...)):
        text = await _read_svg(svg)
        return engine.validate(text).to_dict()

    @app.post("/analyze")
    async def analyze(svg: UploadFile = File(...)):
        text = await _read_svg(svg)
        return engine.analyze(text).to_dict()

    @app.get("/presets")
    async def presets():
        return {name: options.to_dict() for name, options in engine.presets.get_presets().items()}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
