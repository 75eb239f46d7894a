"""
Bundled demo tracker, loaded on startup and by "Use sample".
"""

SAMPLE_LABEL = "Sample tracker"

SAMPLE_TRACKER = """\
Bidding Authority,Bidding Authority,Tender Capacity,Category,Type,Connectivity,RFS No.,RFS Date,RFS Financial Year,eRA,Financial Year,Company,Group Company,Bid Capacity,Won Capacity,Initial Tariff,Final Tariff,Status (e-RA/LOA/PPA/COD),Signed PPA Cap. (MW),Bidding Result,Any Success,Remarks
APTransco,State,1000,ESS/BESS,BESS,STU,APTRANSCO-1 GW-2GWh-BESS+VGF-18LMWh,25-Aug-25,FY 2026,29-Nov-25,FY 2026,Ecoren Energy,Ecoren Energy,50,275,,1.5,e-RA,,Partial Capacity Won,Yes,
APTransco,State,1000,ESS/BESS,BESS,STU,APTRANSCO-1 GW-2GWh-BESS+VGF-18LMWh,25-Aug-25,FY 2026,29-Nov-25,FY 2026,Acme Solar,Acme Solar Holdings,250,0,,,e-RA,,Not Won,No,L3 at close
SECI,Central,1200,RE,Solar,ISTS,SECI-ISTS-XVII,12-Jan-25,FY 2025,14-Mar-25,FY 2025,Acme Solar,Acme Solar Holdings,300,300,2.62,2.52,LOA issued,,Full Capacity Won,Yes,
SECI,Central,1200,RE,Solar,ISTS,SECI-ISTS-XVII,12-Jan-25,FY 2025,14-Mar-25,FY 2025,Avaada Energy,Avaada Group,600,600,2.60,2.53,PPA signed,600,Full Capacity Won,Yes,
SECI,Central,1200,RE,Solar,ISTS,SECI-ISTS-XVII,12-Jan-25,FY 2025,14-Mar-25,FY 2025,NTPC REL,NTPC,300,300,2.61,2.54,"LOA issued, COD achieved",300,Full Capacity Won,Yes,
NHPC,Central,"1,500",RE,Wind-Solar Hybrid,ISTS,NHPC-HYB-T3,03/02/25,FY 2025,21/04/25,FY 2026,ReNew Power,ReNew,500,400,3.40,3.31,e-RA completed,,Partial Capacity Won,Yes,
NHPC,Central,"1,500",RE,Wind-Solar Hybrid,ISTS,NHPC-HYB-T3,03/02/25,FY 2025,21/04/25,FY 2026,Avaada Energy,Avaada Group,500,0,,,Not Applicable,,Not Won,No,Withdrew
GUVNL,State,500,RE,Solar,STU,GUVNL-SOLAR-PH-XXV,2025-06-10,FY 2026,,FY 2026,Juniper Green,Juniper Green Energy,200,,,,Bid submitted,,Awaited,,Results pending
"""
