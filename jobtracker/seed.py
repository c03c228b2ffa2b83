"""Example folders and jobs loaded into an empty data directory."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jobtracker.models import (
    AIAnalysis,
    Company,
    CompanyType,
    Folder,
    FolderColor,
    JobRecord,
    JobStatus,
    Position,
    ReminderEvent,
    Suggestions,
    now_ms,
)

DAY_MS = 24 * 60 * 60 * 1000


def _in_days(days: int) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat(timespec="seconds")


def seed_folders() -> list[Folder]:
    return [
        Folder(id="folder-1", name="互联网大厂", color=FolderColor.BLUE),
        Folder(id="folder-2", name="外企", color=FolderColor.MINT),
        Folder(id="folder-3", name="国企", color=FolderColor.PEACH),
    ]


def seed_jobs() -> list[JobRecord]:
    created = now_ms()
    return [
        JobRecord(
            id="job-1",
            folder_id="folder-1",
            company=Company(name="字节跳动", type=CompanyType.INTERNET),
            position=Position(
                title="高级前端工程师",
                salary="35k-50k",
                location="北京·海淀",
                status=JobStatus.IN_PROGRESS,
                education="本科及以上",
                experience="5年以上",
                deadline=_in_days(5),
            ),
            ai_analysis=AIAnalysis(
                responsibilities=[
                    "负责抖音电商核心页面开发与性能优化",
                    "参与前端架构设计，推动工程化建设",
                    "指导初中级工程师，进行代码评审",
                ],
                requirements=[
                    "5年以上前端开发经验，精通 React/Vue",
                    "具备大型项目性能优化经验",
                    "计算机相关专业本科及以上学历",
                ],
                suggestions=Suggestions(
                    resume="• '性能优化' → 写明首屏时间、转化率等量化结果，突出 React 生态的深度使用",
                    interview="• '前端架构设计' → 准备浏览器渲染原理、React Fiber 与微前端方案的讲解",
                    negotiation="• 总包含期权 → 期权部分可以谈，年终奖通常 3-6 个月",
                ),
            ),
            created_at=created - 7 * DAY_MS,
            apply_link="https://jobs.bytedance.com",
            has_reminder=True,
            reminder_event=ReminderEvent.INTERVIEW,
        ),
        JobRecord(
            id="job-2",
            folder_id="folder-1",
            company=Company(name="阿里巴巴", type=CompanyType.INTERNET),
            position=Position(
                title="前端开发专家",
                salary="40k-60k·16薪",
                location="杭州·余杭",
                education="本科及以上",
                experience="5年以上",
                deadline=_in_days(12),
            ),
            ai_analysis=AIAnalysis(
                responsibilities=["负责淘宝核心业务前端开发", "建设前端基础设施与研发工具"],
                requirements=["精通 JavaScript/TypeScript", "有 Node.js 服务端经验优先"],
                suggestions=Suggestions(
                    resume="• '前端基础设施' → 列出主导过的工具链或组件库及其使用规模",
                    interview="• 'TypeScript' → 准备类型体操与工程实践案例",
                    negotiation="• '16薪' → 核算总包，关注绩效系数与股票归属节奏",
                ),
            ),
            created_at=created - 5 * DAY_MS,
            has_reminder=True,
            reminder_event=ReminderEvent.TO_APPLY,
        ),
        JobRecord(
            id="job-3",
            folder_id="folder-2",
            company=Company(name="微软中国", type=CompanyType.FOREIGN),
            position=Position(
                title="软件开发工程师",
                salary="30k-45k",
                location="苏州",
                status=JobStatus.NEW,
                education="硕士",
                experience="3年以上",
            ),
            ai_analysis=AIAnalysis(
                responsibilities=["参与 Azure 云服务后端开发"],
                requirements=["熟练使用 C# 或 Java", "英语可作为工作语言"],
                suggestions=Suggestions(
                    resume="• '英语可作为工作语言' → 准备英文简历并写明英文工作场景",
                    interview="• '后端开发' → 准备系统设计与算法题，注意英文表达",
                    negotiation="• 外企薪资结构 → 关注签字费与年度调薪比例",
                ),
            ),
            created_at=created - 3 * DAY_MS,
        ),
        JobRecord(
            id="job-4",
            folder_id="folder-3",
            company=Company(name="国家电网", type=CompanyType.STATE_OWNED),
            position=Position(
                title="信息技术岗",
                salary="15k-20k",
                location="北京",
                status=JobStatus.OFFER,
                education="本科及以上",
                experience="应届",
                deadline=_in_days(-2),
            ),
            ai_analysis=AIAnalysis(
                responsibilities=["负责信息系统运维与开发"],
                requirements=["计算机相关专业"],
                suggestions=Suggestions(
                    resume="• '计算机相关专业' → 突出专业课程与项目实践",
                    interview="• '信息系统运维' → 准备常见故障排查思路",
                    negotiation="• 国企薪资透明 → 关注编制、公积金比例与落户政策",
                ),
            ),
            created_at=created - DAY_MS,
            has_reminder=True,
            reminder_event=ReminderEvent.TO_OFFER,
        ),
    ]


def seed_snapshot() -> dict:
    """A store snapshot holding the seed folders and jobs."""
    return {
        "folders": [f.to_dict() for f in seed_folders()],
        "jobs": [j.to_dict() for j in seed_jobs()],
        "chat_sessions": [],
        "current_session_id": None,
        "messages": [],
        "user": None,
    }
