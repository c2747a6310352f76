"""Shared template skill catalog for MSP / IT services organizations.

Template categories are not owned by any organization and are visible to all of
them read-only. Ids are stable (``seed-<slug>``) so re-seeding updates in place.
"""

from __future__ import annotations

import re

TEMPLATE_TYPE_MSP = "MSP"

MSP_TEMPLATE_CATALOG: list[dict] = [
    {
        "name": "End-User Support",
        "description": "Help desk, desktop support, and direct client interaction",
        "skills": [
            ("Windows Troubleshooting", "Windows 10/11 issues, crashes, performance"),
            ("macOS Troubleshooting", "Apple macOS issues, configurations, updates"),
            ("Mobile Device Support", "iOS, Android, MDM enrollment, email setup"),
            ("Printer & Peripheral Setup", "Printers, scanners, docks, monitors"),
            ("Remote Support Delivery", "Screen sharing, remote desktop, RMM tools"),
            ("Password & Account Recovery", "Resets, unlocks, MFA recovery"),
            ("Client Communication", "Explaining tech issues in plain language"),
            ("Ticket Documentation", "Clear notes, time tracking, escalation"),
        ],
    },
    {
        "name": "Network Engineering",
        "description": "Design, implementation, and management of network infrastructure",
        "skills": [
            ("Switching & VLANs", "Managed switches, VLAN design, trunking"),
            ("Routing & NAT", "Static routes, dynamic routing, NAT rules"),
            ("Firewall Configuration", "Firewall rules, policies, UTM features"),
            ("Wireless Design", "WiFi site surveys, AP placement, optimization"),
            ("DNS & DHCP", "DNS zones, DHCP scopes, IP planning"),
            ("VPN Technologies", "Site-to-site, client VPN, SSL/IPsec"),
            ("SD-WAN", "SD-WAN deployment, policy routing, failover"),
            ("Network Diagrams", "Visio, Lucidchart, topology documentation"),
        ],
    },
    {
        "name": "Cybersecurity",
        "description": "Security tools, practices, and incident response",
        "skills": [
            ("Endpoint Detection & Response", "EDR platforms, threat hunting"),
            ("Email Security", "Spam filtering, DMARC, phishing protection"),
            ("Identity & Access", "MFA, SSO, conditional access policies"),
            ("Vulnerability Scanning", "Nessus, Qualys, patch management"),
            ("SIEM & Log Analysis", "Security logging, correlation, alerting"),
            ("Incident Response", "Breach handling, forensics, containment"),
            ("Security Awareness Training", "Phishing simulations, user education"),
            ("Penetration Testing", "Ethical hacking, vulnerability assessment"),
        ],
    },
    {
        "name": "Compliance & Risk",
        "description": "Regulatory frameworks, audits, and risk management",
        "skills": [
            ("HIPAA Compliance", "Healthcare privacy, BAAs, PHI handling"),
            ("PCI-DSS", "Payment card security, SAQ completion"),
            ("SOC 2 / SOC 1", "Trust services criteria, audit preparation"),
            ("NIST / CIS Frameworks", "Security frameworks, controls mapping"),
            ("CMMC / FedRAMP", "Government contractor requirements"),
            ("Cyber Insurance", "Applications, requirements, claims"),
            ("Risk Assessments", "Identifying and documenting business risks"),
            ("Policy Development", "Security policies, acceptable use, procedures"),
        ],
    },
    {
        "name": "Cloud Platforms",
        "description": "Public cloud infrastructure and services",
        "skills": [
            ("Microsoft 365 Admin", "Exchange, SharePoint, Teams admin"),
            ("Entra ID / Azure AD", "Identity, SSO, conditional access"),
            ("Azure IaaS", "VMs, storage, networking in Azure"),
            ("Azure PaaS", "App services, Functions, SQL databases"),
            ("AWS Core Services", "EC2, S3, VPC, IAM"),
            ("Google Cloud Platform", "Compute, storage, GKE"),
            ("Google Workspace Admin", "Gmail, Drive, admin console"),
            ("Cloud Cost Management", "Budgets, tagging, optimization"),
        ],
    },
    {
        "name": "Server & Infrastructure",
        "description": "On-premises servers, virtualization, and data center",
        "skills": [
            ("Windows Server Admin", "Roles, features, updates, troubleshooting"),
            ("Active Directory", "AD design, GPO, replication, trusts"),
            ("Linux Administration", "Command line, services, packages"),
            ("VMware vSphere", "ESXi, vCenter, VM operations"),
            ("Hyper-V", "Hyper-V Manager, clustering, replication"),
            ("Storage Systems", "SAN, NAS, iSCSI, storage tiering"),
            ("Backup & Recovery", "Veeam, Datto, backup testing, RTO/RPO"),
            ("Physical Server Hardware", "Dell, HPE, firmware, RAID"),
        ],
    },
    {
        "name": "Automation & DevOps",
        "description": "Scripting, automation, and modern development practices",
        "skills": [
            ("PowerShell", "Scripts, modules, automation"),
            ("Bash / Shell Scripting", "Linux automation, cron jobs"),
            ("Python", "Automation scripts, API integrations"),
            ("Infrastructure as Code", "Terraform, ARM templates, CloudFormation"),
            ("CI/CD Pipelines", "GitHub Actions, Azure DevOps, Jenkins"),
            ("Containers & Docker", "Docker images, compose, registries"),
            ("Kubernetes", "K8s clusters, pods, services"),
            ("Configuration Management", "Ansible, Puppet, DSC"),
        ],
    },
    {
        "name": "Unified Communications",
        "description": "VoIP, video conferencing, and collaboration tools",
        "skills": [
            ("Microsoft Teams Voice", "Teams Phone, calling plans, auto attendants"),
            ("VoIP Systems", "3CX, RingCentral, Zoom Phone"),
            ("Video Conferencing", "Zoom, Teams Rooms, conference setups"),
            ("Contact Center", "Call queues, IVR, reporting"),
            ("SIP & PBX", "SIP trunks, on-prem PBX systems"),
            ("Collaboration Platforms", "Teams, Slack, workspace setup"),
            ("Fax & Document Workflow", "eFax, document scanning, OCR"),
            ("A/V Equipment", "Displays, cameras, audio systems"),
        ],
    },
    {
        "name": "Sales & Business Development",
        "description": "Revenue generation, client acquisition, and growth",
        "skills": [
            ("Solution Selling", "Consultative sales, needs analysis"),
            ("Proposal Writing", "SOWs, quotes, RFP responses"),
            ("Pipeline Management", "CRM usage, forecasting, stages"),
            ("Client Presentations", "Demos, QBRs, executive meetings"),
            ("Contract Negotiation", "Terms, pricing, renewals"),
            ("Partner Relationships", "Vendor partnerships, referrals"),
            ("Cold Outreach", "Prospecting, cold calls, emails"),
            ("Cross-sell & Upsell", "Identifying expansion opportunities"),
        ],
    },
    {
        "name": "Account Management",
        "description": "Client relationships, retention, and satisfaction",
        "skills": [
            ("Client Relationship Building", "Trust, rapport, regular touchpoints"),
            ("QBR Delivery", "Quarterly business reviews, reporting"),
            ("Escalation Handling", "Managing upset clients, resolution"),
            ("Renewal Management", "Contract renewals, retention strategies"),
            ("SLA Management", "Tracking SLAs, reporting, remediation"),
            ("Client Onboarding", "New client implementation, expectations"),
            ("Satisfaction Surveys", "NPS, CSAT, feedback collection"),
            ("Strategic Planning", "Technology roadmaps with clients"),
        ],
    },
    {
        "name": "Project Management",
        "description": "Planning, execution, and delivery of projects",
        "skills": [
            ("Project Planning", "Scope, timeline, resource allocation"),
            ("Agile / Scrum", "Sprints, standups, retrospectives"),
            ("Waterfall Methodology", "Phases, milestones, gates"),
            ("Risk Management", "Identifying risks, mitigation plans"),
            ("Stakeholder Communication", "Status updates, expectation setting"),
            ("Budget Management", "Project budgets, change orders"),
            ("Resource Coordination", "Team scheduling, capacity planning"),
            ("Project Documentation", "Plans, change logs, lessons learned"),
        ],
    },
    {
        "name": "Finance & Accounting",
        "description": "Financial management, reporting, and operations",
        "skills": [
            ("Accounts Receivable", "Invoicing, collections, aging"),
            ("Accounts Payable", "Vendor payments, expense processing"),
            ("Financial Reporting", "P&L, balance sheet, cash flow"),
            ("Budgeting & Forecasting", "Annual budgets, projections"),
            ("Payroll Processing", "Payroll, benefits, tax withholding"),
            ("Contract Billing", "MRR calculations, recurring billing"),
            ("Profitability Analysis", "Service margins, client profitability"),
            ("Tax & Compliance", "Tax filings, audits, compliance"),
        ],
    },
    {
        "name": "Human Resources",
        "description": "People management, culture, and employee lifecycle",
        "skills": [
            ("Recruiting & Hiring", "Job postings, interviews, offers"),
            ("Onboarding", "New hire orientation, training plans"),
            ("Performance Management", "Reviews, feedback, improvement plans"),
            ("Benefits Administration", "Health, 401k, PTO management"),
            ("Employee Relations", "Conflict resolution, investigations"),
            ("Training & Development", "Learning paths, certifications, growth"),
            ("Culture Building", "Team events, recognition, engagement"),
            ("HR Compliance", "Labor laws, policies, documentation"),
        ],
    },
    {
        "name": "Marketing & Brand",
        "description": "Brand awareness, lead generation, and communications",
        "skills": [
            ("Content Creation", "Blog posts, whitepapers, case studies"),
            ("Social Media", "LinkedIn, Twitter, posting, engagement"),
            ("Email Marketing", "Newsletters, campaigns, automation"),
            ("SEO / SEM", "Search optimization, Google Ads"),
            ("Website Management", "CMS updates, landing pages"),
            ("Event Planning", "Webinars, trade shows, client events"),
            ("Graphic Design", "Canva, Adobe, branded materials"),
            ("Marketing Analytics", "Campaign tracking, attribution"),
        ],
    },
    {
        "name": "Operations & Administration",
        "description": "Day-to-day business operations and office management",
        "skills": [
            ("Process Documentation", "SOPs, runbooks, checklists"),
            ("Vendor Management", "Vendor relationships, negotiations"),
            ("Office Management", "Facilities, supplies, logistics"),
            ("Meeting Coordination", "Scheduling, agendas, minutes"),
            ("Travel Arrangements", "Booking, itineraries, expenses"),
            ("Inventory Management", "Asset tracking, procurement"),
            ("Quality Assurance", "Service quality, audits, improvement"),
            ("Business Continuity", "BCP planning, testing, updates"),
        ],
    },
    {
        "name": "Leadership & Strategy",
        "description": "Strategic thinking, team leadership, and business growth",
        "skills": [
            ("Team Leadership", "Coaching, mentoring, delegation"),
            ("Strategic Planning", "Vision, goals, execution roadmap"),
            ("Change Management", "Leading transitions, adoption"),
            ("Decision Making", "Data-driven decisions, prioritization"),
            ("Stakeholder Management", "Board, investors, partners"),
            ("M&A / Integration", "Acquisitions, mergers, integration"),
            ("P&L Ownership", "Revenue, costs, profitability"),
            ("Business Development", "New markets, partnerships, growth"),
        ],
    },
    {
        "name": "Communication & Training",
        "description": "Teaching, writing, and presentation skills",
        "skills": [
            ("Technical Writing", "Documentation, KB articles, guides"),
            ("Presentation Skills", "Public speaking, slides, demos"),
            ("Training Delivery", "Teaching, workshops, onboarding"),
            ("Video Production", "Screen recordings, editing, tutorials"),
            ("Cross-team Communication", "Bridging departments, translating"),
            ("Client Education", "Explaining complex topics simply"),
            ("Conflict Resolution", "De-escalation, mediation"),
            ("Written Communication", "Emails, reports, proposals"),
        ],
    },
    {
        "name": "Data & Analytics",
        "description": "Data analysis, reporting, and business intelligence",
        "skills": [
            ("Excel / Spreadsheets", "Formulas, pivot tables, analysis"),
            ("Power BI", "Dashboards, data modeling, DAX"),
            ("SQL Queries", "Database queries, data extraction"),
            ("Data Visualization", "Charts, graphs, storytelling"),
            ("KPI Definition", "Metrics that matter, benchmarking"),
            ("Process Mining", "Workflow analysis, bottlenecks"),
            ("Forecasting", "Trends, predictions, modeling"),
            ("Report Automation", "Scheduled reports, dashboards"),
        ],
    },
    {
        "name": "Creative & Design",
        "description": "Visual design, UX, and creative problem solving",
        "skills": [
            ("UI/UX Design", "User interfaces, experience design"),
            ("Graphic Design", "Adobe Creative Suite, Canva, Figma"),
            ("Branding", "Logos, style guides, brand identity"),
            ("Video Editing", "Premiere, Final Cut, motion graphics"),
            ("Photography", "Product shots, headshots, events"),
            ("Copywriting", "Marketing copy, taglines, messaging"),
            ("Wireframing", "Mockups, prototypes, user flows"),
            ("Print Design", "Brochures, business cards, signage"),
        ],
    },
    {
        "name": "Personal Effectiveness",
        "description": "Individual productivity, mindset, and self-management",
        "skills": [
            ("Time Management", "Prioritization, calendaring, focus"),
            ("Problem Solving", "Root cause analysis, creative solutions"),
            ("Adaptability", "Handling change, learning quickly"),
            ("Attention to Detail", "Accuracy, thoroughness, quality"),
            ("Self-motivation", "Initiative, drive, accountability"),
            ("Stress Management", "Handling pressure, work-life balance"),
            ("Continuous Learning", "Staying current, self-improvement"),
            ("Organization", "File management, task tracking"),
        ],
    },
]


def seed_id(name: str) -> str:
    """``"Network Engineering"`` -> ``"seed-network-engineering"``."""
    return "seed-" + re.sub(r"\s+", "-", name.strip().lower())
