from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse

from nsaudit import NSAuditTool, __version__
from nsaudit.config import AuditConfig
from nsaudit.logging_config import init_logging
from nsreport.assembler import Assemble
from nsreport.targets import InvalidDomain, require_domain

# Resolver, timeouts, deadline and enrichment come from NSAUDIT_* environment variables.
config = AuditConfig.from_env()
init_logging({"level": config.log_level})

app = FastAPI(title="Nameserver Delegation Auditor")
tool = NSAuditTool(config)
assembler = Assemble()


@app.get("/health")
def health():
    return {"ok": True, "resolver": config.resolver}


@app.get("/check")
def check(zone: str = Query(..., min_length=1, max_length=253)):
    try:
        zone = require_domain(zone)
    except InvalidDomain as e:
        raise HTTPException(status_code=400, detail=str(e))

    report = tool.check_zone(zone)
    response = assembler.build(
        target=zone,
        checks={"delegation": report},
        meta={"version": __version__, "source": "api"},
    )
    return JSONResponse(content=response)
